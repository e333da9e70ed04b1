from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ConfirmReservationPayload(BaseModel):
    """
    Schema for confirming a hold into a reservation.

    Field aliases follow the booking authority's contract, so a client can post
    the same body it would send upstream. Snake case names are accepted too.
    """

    model_config = ConfigDict(populate_by_name=True)

    room_id: Optional[str] = Field(None, alias="idHabitacion", description="Room the hold is for")
    hold_id: str = Field(..., alias="idHold", description="Hold being confirmed")
    first_name: str = Field(..., alias="nombre")
    last_name: str = Field(..., alias="apellido")
    email: str = Field(..., alias="correo")
    document_type: str = Field(..., alias="tipoDocumento")
    document_number: str = Field(..., alias="documento")
    start_date: date = Field(..., alias="fechaInicio")
    end_date: date = Field(..., alias="fechaFin")
    guest_count: int = Field(1, alias="numeroHuespedes", ge=1)
    payment_method_id: Optional[int] = Field(None, alias="metodoPago")


class CancellationOut(BaseModel):
    success: bool
    refund_amount: Decimal = Field(..., description="Sum of the payments recorded for the reservation")
    message: str

    @field_serializer("refund_amount")
    def serialize_refund_amount(self, value: Decimal) -> float:
        return float(value)
