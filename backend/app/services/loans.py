"""Home loan EMI arithmetic."""

from dataclasses import dataclass

DEFAULT_INTEREST_RATE = 7.7
DEFAULT_TENURE_YEARS = 20
DEFAULT_LOAN_TO_VALUE = 0.8
DEFAULT_LOAN_CAP = 5_200_000


@dataclass(frozen=True)
class EmiBreakdown:
    emi: float
    total_amount: float
    total_interest: float
    months: int


def default_loan_amount(property_price: float) -> float:
    """80% of the price, capped at the usual pre-approved amount."""
    return min(property_price * DEFAULT_LOAN_TO_VALUE, DEFAULT_LOAN_CAP)


def calculate_emi(
    loan_amount: float,
    annual_rate: float = DEFAULT_INTEREST_RATE,
    tenure_years: float = DEFAULT_TENURE_YEARS,
) -> EmiBreakdown:
    """Equated monthly instalment for a reducing-balance loan.

    ``annual_rate`` is a percentage. A zero rate spreads the principal evenly.
    """
    months = round(tenure_years * 12)
    if loan_amount <= 0 or months <= 0:
        raise ValueError("Loan amount and tenure must be positive")
    if annual_rate < 0:
        raise ValueError("Interest rate cannot be negative")

    monthly_rate = annual_rate / (12 * 100)
    if monthly_rate == 0:
        emi = loan_amount / months
    else:
        growth = (1 + monthly_rate) ** months
        emi = loan_amount * monthly_rate * growth / (growth - 1)

    total_amount = emi * months
    return EmiBreakdown(
        emi=emi,
        total_amount=total_amount,
        total_interest=total_amount - loan_amount,
        months=months,
    )
