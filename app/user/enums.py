SUPERADMIN = "SUPERADMIN"
FINANCE_ADMIN = "FINANCE_ADMIN"
EMPLOYEE = "EMPLOYEE"
