from jsonschema import ValidationError, validate

from marketplace.api.ws.constants import RSPCode
from marketplace.logging import logger
from marketplace.schemas.generic_typing import JsonSchemaType
from marketplace.schemas.request import RequestModel
from marketplace.schemas.response import ResponseModel


def validator(
    request: RequestModel, schema: JsonSchemaType
) -> ResponseModel | None:
    """
    Validates the data field of a RequestModel instance against the provided JSON schema.

    Args:
        request (RequestModel): The request model instance to validate.
        schema (JsonSchemaType): The JSON schema to validate the request data against.

    Returns:
        ResponseModel | None: An error response if the data is invalid,
        otherwise None.
    """
    try:
        validate(request.data, schema)
    except ValidationError as ex:
        logger.error(f"Invalid data for PkgID {request.pkg_id}: \n{ex}")

        return ResponseModel.err_msg(
            request.pkg_id,
            request.req_id,
            msg=ex.message,
            status_code=RSPCode.INVALID_DATA,
        )

    return None
