import logging

from celery import shared_task

from apps.inventoryapp.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)


@shared_task
def refresh_stock_predictions():
    """
    Recompute average daily sales and stockout dates for all active items,
    then warn managers about items at risk.
    """
    updated = InventoryService.refresh_predictions()
    logger.info(f"Refreshed stock predictions for {updated} items")

    from apps.notificationsapp.services.notification_service import NotificationService

    low_stock = InventoryService.low_stock_queryset().select_related("location")
    for item in low_stock:
        try:
            NotificationService.notify_admins(
                "low_stock",
                title="Low stock",
                message=f"{item.name} ({item.sku}) has {item.quantity} left at {item.location.name}",
                data={"item_id": str(item.id), "quantity": item.quantity},
                location_id=item.location_id,
                related_entity_type="inventory_item",
                related_entity_id=str(item.id),
            )
        except Exception:
            logger.exception(f"Could not send low stock notification for {item.sku}")

    return {"updated": updated, "low_stock": len(low_stock)}
