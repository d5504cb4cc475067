# Upstream (bank-data provider) category prefixes, most specific first.
# An entry matches the exact prefix or any detailed category below it.
UPSTREAM_CATEGORY_MAP: tuple[tuple[str, str], ...] = (
    ("FOOD_AND_DRINK", "Food"),
    ("TRANSPORTATION", "Transportation"),
    ("TRAVEL", "Transportation"),
    ("GENERAL_MERCHANDISE", "Shopping"),
    ("SHOPPING", "Shopping"),
    ("HOME_IMPROVEMENT", "Utilities"),
    ("RENT_AND_UTILITIES_INTERNET", "Internet"),
    ("RENT_AND_UTILITIES_TELEPHONE", "Phone"),
    ("RENT_AND_UTILITIES_RENT", "Rent"),
    ("RENT_AND_UTILITIES", "Utilities"),
    ("GENERAL_SERVICES_INSURANCE", "Insurance"),
    ("GENERAL_SERVICES_EDUCATION", "Business"),
    ("GENERAL_SERVICES", "Utilities"),
    ("SERVICE", "Utilities"),
    ("ENTERTAINMENT", "Entertainment"),
    ("RECREATION", "Entertainment"),
    ("MEDICAL", "Health"),
    ("HEALTHCARE", "Health"),
    ("PERSONAL_CARE", "Health"),
    ("EDUCATION", "Business"),
    ("INCOME", "Salary"),
    ("TRANSFER_IN", "Other Income"),
    ("TRANSFER_OUT", "Other Expenses"),
    ("LOAN_PAYMENTS_CAR_PAYMENT", "Car Payment"),
    ("LOAN_PAYMENTS_CREDIT_CARD_PAYMENT", "Credit Card"),
    ("LOAN_PAYMENTS", "Loan Payment"),
    ("BANK_FEES", "Other Expenses"),
    ("FINANCIAL_SERVICES", "Other Expenses"),
    ("GOVERNMENT_AND_NON_PROFIT", "Other Expenses"),
)


def map_upstream_category(category: str | None) -> str | None:
    """Translate an upstream category (primary or detailed) into a budget category."""
    if not category:
        return None
    key = category.strip().upper()
    for prefix, budget_category in UPSTREAM_CATEGORY_MAP:
        if key == prefix or key.startswith(prefix + "_"):
            return budget_category
    return None
