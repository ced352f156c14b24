from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from carlot.entrypoints.http.dependencies import get_record_sale_use_case
from carlot.entrypoints.http.dtos.sales import SaleResponseDTO
from carlot.entrypoints.http.mappers.sale_mapper import SaleMapper
from carlot.entrypoints.http.mappers.upload_mapper import UploadMapper
from carlot.use_cases.record_sale import RecordSale, RecordSaleRequest


router = APIRouter(tags=["Sales"])


@router.post(
    "/cars/{car_id}/sale",
    response_model=SaleResponseDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Mark a car as sold",
    description="""
    Multipart form with the buyer's details and optional `documents`.

    ## Fields
    - Required: `client_name`, `client_email`, `sale_date` (YYYY-MM-DD),
      `payment_method` (cash, bank_transfer, check, financing, trade_in)
    - `sale_price` defaults to the car's price and must be positive

    A car that is already sold answers 409 and nothing is written. If the
    sale is stored but the car cannot be flipped to sold, the answer is
    502 with both ids in the context.
    """,
)
def record_sale(
    car_id: str,
    client_name: str = Form(default=""),
    client_email: str = Form(default=""),
    sale_date: str | None = Form(default=None, examples=["2024-03-18"]),
    payment_method: str | None = Form(default=None, examples=["cash"]),
    sale_price: str | None = Form(default=None, examples=["640000.00"]),
    client_phone: str | None = Form(default=None),
    client_address: str | None = Form(default=None),
    documents: list[UploadFile] | None = File(default=None),
    use_case: RecordSale = Depends(get_record_sale_use_case),
) -> SaleResponseDTO:
    form = SaleMapper.to_domain_form(
        client_name=client_name,
        client_email=client_email,
        sale_date=sale_date,
        payment_method=payment_method,
        sale_price=sale_price,
        client_phone=client_phone,
        client_address=client_address,
        documents=UploadMapper.to_staged_list(documents),
    )
    recorded = use_case.execute(RecordSaleRequest(car_id=car_id, form=form))
    return SaleMapper.to_response(recorded)
