"""Custom field registry endpoints."""

from fastapi import APIRouter, HTTPException, Response, status

from payslip_engine.api.dependencies import Registry
from payslip_engine.api.schemas import (
    CustomFieldCreate,
    CustomFieldResponse,
    CustomFieldUpdate,
    ErrorResponse,
)
from payslip_engine.calculators.types import CustomField

router = APIRouter(prefix="/custom-fields", tags=["custom-fields"])


@router.get("", response_model=list[CustomFieldResponse])
async def list_custom_fields(registry: Registry) -> list[CustomFieldResponse]:
    """List custom fields in the order they are applied."""
    return [CustomFieldResponse.model_validate(f) for f in registry.list()]


@router.post(
    "",
    response_model=CustomFieldResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_custom_field(
    registry: Registry,
    payload: CustomFieldCreate,
) -> CustomFieldResponse:
    """Register a custom field. DuplicateFieldError maps to 409."""
    if payload.id:
        field = registry.add(
            CustomField(
                id=payload.id,
                name=payload.name,
                kind=payload.kind,
                default_value=payload.default_value,
            )
        )
    else:
        field = registry.add(
            name=payload.name, kind=payload.kind, default_value=payload.default_value
        )
    return CustomFieldResponse.model_validate(field)


@router.patch(
    "/{field_id}",
    response_model=CustomFieldResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_custom_field(
    registry: Registry,
    field_id: str,
    payload: CustomFieldUpdate,
) -> CustomFieldResponse:
    """Change a custom field without moving it in the order."""
    changes = {
        k: v
        for k, v in payload.model_dump(exclude_unset=True).items()
        if v is not None or k == "default_value"
    }
    try:
        field = registry.update(field_id, **changes)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Custom field not found",
        )
    return CustomFieldResponse.model_validate(field)


@router.delete("/{field_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_custom_field(registry: Registry, field_id: str) -> Response:
    """Remove a custom field. Unknown ids are not an error."""
    registry.remove(field_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
