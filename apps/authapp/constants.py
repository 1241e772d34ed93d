"""
Constants for the authentication application.
"""

ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_TECHNICIAN = "technician"
ROLE_SALES = "sales"
ROLE_CUSTOMER_SERVICE = "customer_service"

ROLES = (
    ROLE_ADMIN,
    ROLE_MANAGER,
    ROLE_TECHNICIAN,
    ROLE_SALES,
    ROLE_CUSTOMER_SERVICE,
)

# Roles allowed to manage catalogue data, SMS settings and campaigns
MANAGEMENT_ROLES = (ROLE_ADMIN, ROLE_MANAGER)
