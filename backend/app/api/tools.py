from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from app.services.area import (
    convert_area,
    format_area_with_unit,
    standardize_area_unit,
)
from app.services.formatting import format_price_display
from app.services.loans import (
    DEFAULT_INTEREST_RATE,
    DEFAULT_TENURE_YEARS,
    calculate_emi,
    default_loan_amount,
)

router = APIRouter(prefix="/tools", tags=["tools"])


class AreaConversion(BaseModel):
    value: float
    from_unit: str
    to_unit: str
    result: float
    display: str


class EmiQuote(BaseModel):
    loan_amount: float
    interest_rate: float
    tenure_years: float
    months: int
    emi: float
    total_amount: float
    total_interest: float
    emi_display: str


@router.get("/area-convert", response_model=AreaConversion)
async def area_convert(
    value: float = Query(..., ge=0),
    from_unit: str = Query("sq.ft"),
    to_unit: str = Query("sq.ft"),
):
    """Convert a land or plot area between units. Unit names accept common aliases."""
    source = standardize_area_unit(from_unit)
    target = standardize_area_unit(to_unit)
    result = convert_area(value, source, target)
    return AreaConversion(
        value=value,
        from_unit=source,
        to_unit=target,
        result=result,
        display=format_area_with_unit(result, target),
    )


@router.get("/emi", response_model=EmiQuote)
async def emi_quote(
    loan_amount: float | None = Query(None, gt=0, alias="loanAmount"),
    property_price: float | None = Query(None, gt=0, alias="propertyPrice"),
    interest_rate: float = Query(DEFAULT_INTEREST_RATE, ge=0, le=50, alias="interestRate"),
    tenure_years: float = Query(DEFAULT_TENURE_YEARS, gt=0, le=40, alias="tenureYears"),
):
    """Monthly instalment for a home loan.

    Without ``loanAmount`` the loan defaults to 80% of ``propertyPrice``.
    """
    if loan_amount is None:
        if property_price is None:
            raise HTTPException(
                status_code=422, detail="Either loanAmount or propertyPrice is required"
            )
        loan_amount = default_loan_amount(property_price)

    quote = calculate_emi(loan_amount, interest_rate, tenure_years)
    return EmiQuote(
        loan_amount=loan_amount,
        interest_rate=interest_rate,
        tenure_years=tenure_years,
        months=quote.months,
        emi=round(quote.emi, 2),
        total_amount=round(quote.total_amount, 2),
        total_interest=round(quote.total_interest, 2),
        emi_display=format_price_display(round(quote.emi)),
    )
