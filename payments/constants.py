"""Payment types, methods, due buckets and billing cycle constants."""

# Payment types
RENT = "RENT"
EXTRA = "EXTRA"
REGISTRATION = "REGISTRATION"
REACTIVATION = "REACTIVATION"
SECURITY_DEPOSIT = "SECURITY_DEPOSIT"

PAYMENT_TYPE_CHOICES = [
    (RENT, "Rent"),
    (EXTRA, "Extra"),
    (REGISTRATION, "Registration"),
    (REACTIVATION, "Reactivation"),
    (SECURITY_DEPOSIT, "Security deposit"),
]

# Payment methods
CASH = "CASH"
BANK_TRANSFER = "BANK_TRANSFER"
ESEWA = "ESEWA"
KHALTI = "KHALTI"
FONEPAY = "FONEPAY"

PAYMENT_METHOD_CHOICES = [
    (CASH, "Cash"),
    (BANK_TRANSFER, "Bank transfer"),
    (ESEWA, "eSewa"),
    (KHALTI, "Khalti"),
    (FONEPAY, "Fonepay"),
]

# Allocation kinds
MONTHLY = "MONTHLY"

# Due status buckets
OVERDUE = "OVERDUE"
DUE_SOON = "DUE_SOON"
OK = "OK"

BILLING_CYCLE_DAYS = 30
DUE_SOON_DAYS = 7
