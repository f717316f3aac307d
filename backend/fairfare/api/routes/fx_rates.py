"""
Foreign exchange rates routes.
"""
from decimal import Decimal
from fastapi import APIRouter, Depends, HTTPException, status
from fairfare.api.dependencies import get_current_user, get_rate_provider
from fairfare.models.user import User
from fairfare.schemas.exchange_rate import ConversionResponse, RatesResponse
from fairfare.services.fx_service import COMMON_CURRENCIES, RateProvider, convert

router = APIRouter(prefix="/fx-rates", tags=["fx-rates"])


@router.get("/latest", response_model=RatesResponse)
async def get_latest_rates(
    base: str = "USD",
    common_only: bool = False,
    current_user: User = Depends(get_current_user),
    provider: RateProvider = Depends(get_rate_provider)
):
    """Latest rates for a base currency, optionally only the common currencies."""
    try:
        rates = await provider.fetch(base)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Failed to fetch exchange rate: {str(e)}"
        )
    if common_only:
        rates = {code: rate for code, rate in rates.items() if code in COMMON_CURRENCIES}
    return RatesResponse(base_currency=base.upper(), rates=rates)


@router.get("/convert", response_model=ConversionResponse)
async def convert_amount(
    amount: Decimal = Decimal(1),
    from_currency: str = "USD",
    to_currency: str = "INR",
    current_user: User = Depends(get_current_user),
    provider: RateProvider = Depends(get_rate_provider)
):
    """Convert an amount between two currencies."""
    try:
        rates = await provider.fetch(from_currency)
        converted = convert(amount, rates, to_currency)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Failed to fetch exchange rate: {str(e)}"
        )
    return ConversionResponse(
        amount=amount,
        from_currency=from_currency.upper(),
        to_currency=to_currency.upper(),
        rate=rates[to_currency.upper()],
        converted=converted.quantize(Decimal("0.01"))
    )
