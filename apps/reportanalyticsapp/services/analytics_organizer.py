"""
Analytics Data Organizer

Turns feedback, device and sales rows into the time series and breakdowns the
dashboard charts consume. Every report carries a ``metadata`` block; when the
primary query for a report returns no rows the daily series is synthesised and
``isDemoData`` is set so the frontend can label the chart accordingly.
"""

import logging
from collections import defaultdict
from datetime import timedelta
from decimal import Decimal

import numpy as np
from django.db.models import Count
from django.utils import timezone

from apps.reportanalyticsapp.utils.aggregation_utils import BUCKETS, AggregationUtils, round2

logger = logging.getLogger(__name__)

TIME_RANGES = {
    "7d": 7,
    "30d": 30,
    "90d": 90,
    "180d": 180,
    "365d": 365,
}
DEFAULT_TIME_RANGE = "30d"

COMPLETED_STATUSES = ("completed", "ready_for_pickup", "delivered")
TOP_CUSTOMERS = 10

DEMO_SATISFACTION = (4.2, 4.8)
DEMO_EFFICIENCY = (75.0, 95.0)
DEMO_NEW_CUSTOMERS = (0, 6)
DEMO_REVENUE = (1000.0, 5000.0)


def parse_time_range(value):
    """Normalise a ``?range=`` value; anything unknown falls back to 30 days."""
    return value if value in TIME_RANGES else DEFAULT_TIME_RANGE


def _breakdown(groups):
    """
    Summarise ``{name: [scores]}`` as a list sorted by name.
    """
    result = []
    for name in sorted(groups):
        values = groups[name]
        result.append({"name": name, "average": AggregationUtils.mean(values), "count": len(values)})
    return result


class AnalyticsDataOrganizer:
    """
    Builds the analytics reports for one location, or for all locations when
    ``location_id`` is None.

    ``seed`` makes the demo series reproducible.
    """

    def __init__(self, location_id=None, now=None, seed=None):
        self.location_id = location_id
        self.now = now or timezone.now()
        self.rng = np.random.default_rng(seed)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def window(self, time_range):
        key = parse_time_range(time_range)
        return key, self.now - timedelta(days=TIME_RANGES[key])

    def _scoped(self, queryset, field="location"):
        if self.location_id:
            return queryset.filter(**{f"{field}_id": self.location_id})
        return queryset

    def _day(self, value):
        return timezone.localdate(value)

    def _fill(self, daily, start, fill_value=None):
        return AggregationUtils.fill_time_series_gaps(
            daily, self._day(start), self._day(self.now), fill_value=fill_value
        )

    def _demo_series(self, start, low, high, integers=False):
        days = list(self._fill({}, start).keys())
        if integers:
            values = self.rng.integers(int(low), int(high), size=len(days))
        else:
            values = self.rng.uniform(low, high, size=len(days))
        return {day: round2(value) for day, value in zip(days, values)}

    def _metadata(self, time_range, data_points, has_real_data):
        return {
            "hasRealData": has_real_data,
            "isDemoData": not has_real_data,
            "timeRange": time_range,
            "dataPoints": data_points,
            "generatedAt": timezone.now().isoformat(),
        }

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------
    def customer_satisfaction(self, time_range=DEFAULT_TIME_RANGE):
        """
        Average overall satisfaction per day, per device type, service type,
        technician and location, plus weekly/monthly/quarterly trends.
        """
        from apps.devicesapp.models import DeviceFeedback

        key, start = self.window(time_range)
        feedback = (
            self._scoped(DeviceFeedback.objects.all())
            .filter(submitted_at__gte=start)
            .select_related("device__device_type", "device__service_type", "device__assigned_to", "location")
        )

        per_day = defaultdict(list)
        by_type = defaultdict(list)
        by_service = defaultdict(list)
        by_technician = defaultdict(list)
        by_location = defaultdict(list)
        records = []

        for row in feedback:
            score = row.overall_satisfaction
            day = self._day(row.submitted_at)
            device = row.device
            per_day[day].append(score)
            records.append((day, score))
            by_type[device.type_label or "Unknown"].append(score)
            by_service[device.service_type.name if device.service_type else "General"].append(score)
            by_technician[
                device.assigned_to.get_full_name() if device.assigned_to else "Unassigned"
            ].append(score)
            by_location[row.location.name].append(score)

        if records:
            daily = self._fill({day: np.mean(scores) for day, scores in per_day.items()}, start)
            overall = AggregationUtils.mean(score for _, score in records)
            total = len(records)
        else:
            logger.info(f"No feedback for {key} (location={self.location_id}); using demo data")
            daily = self._demo_series(start, *DEMO_SATISFACTION)
            records = list(daily.items())
            overall = AggregationUtils.mean(daily.values())
            total = 0

        return {
            "daily": daily,
            "byDeviceType": _breakdown(by_type),
            "byServiceType": _breakdown(by_service),
            "byTechnician": _breakdown(by_technician),
            "byLocation": _breakdown(by_location),
            "trends": {
                name: AggregationUtils.bucket_means(records, freq) for name, freq in BUCKETS.items()
            },
            "overall": overall,
            "totalResponses": total,
            "metadata": self._metadata(key, total if total else len(daily), bool(total)),
        }

    def repair_performance(self, time_range=DEFAULT_TIME_RANGE):
        """
        Daily efficiency (share of that day's intake now delivered) and
        completion times broken down by device type, technician and priority.
        """
        from apps.devicesapp.models import Device

        key, start = self.window(time_range)
        devices = list(
            self._scoped(Device.objects.filter(is_active=True))
            .filter(created_at__gte=start)
            .select_related("device_type", "assigned_to")
        )

        intake = defaultdict(int)
        delivered = defaultdict(int)
        completion_days = []
        groups = {"byDeviceType": {}, "byTechnician": {}, "byPriority": {}}

        for device in devices:
            day = self._day(device.created_at)
            intake[day] += 1
            if device.status == "delivered":
                delivered[day] += 1

            finished_at = device.actual_completion_date or device.delivered_at
            days = None
            if finished_at:
                days = (finished_at - device.created_at).total_seconds() / 86400
                completion_days.append(days)

            names = {
                "byDeviceType": device.type_label or "Unknown",
                "byTechnician": device.assigned_to.get_full_name() if device.assigned_to else "Unassigned",
                "byPriority": device.priority,
            }
            for group, name in names.items():
                stats = groups[group].setdefault(name, {"count": 0, "completed": 0, "days": []})
                stats["count"] += 1
                if device.status in COMPLETED_STATUSES:
                    stats["completed"] += 1
                if days is not None:
                    stats["days"].append(days)

        if devices:
            efficiency = {day: delivered[day] * 100.0 / count for day, count in intake.items()}
            daily = self._fill(efficiency, start)
        else:
            logger.info(f"No devices for {key} (location={self.location_id}); using demo data")
            daily = self._demo_series(start, *DEMO_EFFICIENCY)

        breakdowns = {
            group: [
                {
                    "name": name,
                    "count": stats["count"],
                    "completed": stats["completed"],
                    "avgCompletionDays": AggregationUtils.mean(stats["days"]),
                }
                for name, stats in sorted(entries.items())
            ]
            for group, entries in groups.items()
        }

        return {
            "dailyEfficiency": daily,
            "averageEfficiency": AggregationUtils.mean(daily.values()),
            "avgCompletionDays": AggregationUtils.mean(completion_days),
            "totalDevices": len(devices),
            **breakdowns,
            "metadata": self._metadata(key, len(devices) if devices else len(daily), bool(devices)),
        }

    def customer_behavior(self, time_range=DEFAULT_TIME_RANGE):
        """
        Lifetime value leaders, visit frequency buckets and new customers per day.
        """
        from apps.customersapp.models import Customer
        from apps.customersapp.services.customer_service import CustomerService
        from apps.devicesapp.models import Device
        from apps.salesapp.models import Sale

        key, start = self.window(time_range)
        customers = self._scoped(Customer.objects.filter(is_active=True))

        lifetime = []
        for customer in CustomerService.annotate_stats(customers):
            value = customer.device_spent + customer.sales_spent
            if value > 0:
                lifetime.append(
                    {"id": str(customer.pk), "name": customer.name, "phone": customer.phone, "value": round2(value)}
                )
        lifetime.sort(key=lambda row: (-row["value"], row["name"]))

        visits = defaultdict(int)
        for model, extra in ((Device, {"is_active": True}), (Sale, {})):
            counts = (
                model.objects.filter(customer__in=customers, **extra)
                .values("customer")
                .annotate(total=Count("id"))
            )
            for row in counts:
                visits[row["customer"]] += row["total"]

        frequency = {"New": 0, "Returning": 0, "Loyal": 0}
        for count in visits.values():
            if count == 1:
                frequency["New"] += 1
            elif count <= 5:
                frequency["Returning"] += 1
            else:
                frequency["Loyal"] += 1

        joined = list(customers.filter(created_at__gte=start).values_list("created_at", flat=True))
        if joined:
            per_day = defaultdict(int)
            for created_at in joined:
                per_day[self._day(created_at)] += 1
            new_customers = self._fill(per_day, start, fill_value=0)
        else:
            logger.info(f"No new customers for {key} (location={self.location_id}); using demo data")
            new_customers = self._demo_series(start, *DEMO_NEW_CUSTOMERS, integers=True)

        return {
            "topCustomers": lifetime[:TOP_CUSTOMERS],
            "visitFrequency": frequency,
            "newCustomers": new_customers,
            "totalCustomers": customers.count(),
            "metadata": self._metadata(key, len(joined) if joined else len(new_customers), bool(joined)),
        }

    def revenue(self, time_range=DEFAULT_TIME_RANGE):
        """
        Revenue per day (sales plus delivered repairs), per service type and
        per location.
        """
        from apps.devicesapp.models import Device
        from apps.salesapp.models import Sale

        key, start = self.window(time_range)
        sales = (
            self._scoped(Sale.objects.all())
            .filter(created_at__gte=start)
            .values_list("created_at", "total_amount", "location__name")
        )
        repairs = (
            self._scoped(Device.objects.filter(is_active=True, status="delivered"))
            .filter(delivered_at__gte=start)
            .values_list("delivered_at", "total_cost", "location__name", "service_type__name")
        )

        per_day = defaultdict(Decimal)
        by_service = defaultdict(Decimal)
        by_location = defaultdict(Decimal)
        sales_total = Decimal("0")
        repair_total = Decimal("0")

        for created_at, amount, location in sales:
            per_day[self._day(created_at)] += amount
            by_location[location] += amount
            sales_total += amount

        for delivered_at, amount, location, service in repairs:
            amount = amount or Decimal("0")
            per_day[self._day(delivered_at)] += amount
            by_location[location] += amount
            by_service[service or "General"] += amount
            repair_total += amount

        data_points = len(sales) + len(repairs)
        if data_points:
            daily = self._fill(per_day, start, fill_value=0)
        else:
            logger.info(f"No revenue for {key} (location={self.location_id}); using demo data")
            daily = self._demo_series(start, *DEMO_REVENUE)

        def as_list(totals):
            return [{"name": name, "total": round2(value)} for name, value in sorted(totals.items())]

        return {
            "daily": daily,
            "byServiceType": as_list(by_service),
            "byLocation": as_list(by_location),
            "salesTotal": round2(sales_total),
            "repairTotal": round2(repair_total),
            "total": round2(sales_total + repair_total),
            "metadata": self._metadata(key, data_points if data_points else len(daily), bool(data_points)),
        }

    def comprehensive(self, time_range=DEFAULT_TIME_RANGE):
        key = parse_time_range(time_range)
        reports = {
            "satisfaction": self.customer_satisfaction(key),
            "performance": self.repair_performance(key),
            "behavior": self.customer_behavior(key),
            "revenue": self.revenue(key),
        }
        metadata = [report["metadata"] for report in reports.values()]
        combined = self._metadata(
            key, sum(m["dataPoints"] for m in metadata), any(m["hasRealData"] for m in metadata)
        )
        combined["isDemoData"] = any(m["isDemoData"] for m in metadata)
        reports["metadata"] = combined
        return reports
