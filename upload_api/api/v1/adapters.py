"""
Storage adapter status endpoint.
"""

from fastapi import APIRouter

from upload_api.dependencies import Resolver
from upload_api.schemas.file import AdapterStatusResponse, MimeTypeBindingResponse

router = APIRouter()


@router.get("", response_model=AdapterStatusResponse, response_model_by_alias=True)
async def adapter_status(resolver: Resolver):
    """
    Report which adapters are installed and which are bound.

    Does not construct any adapter.
    """
    return AdapterStatusResponse(
        default_adapter=resolver.default_identity,
        capabilities=resolver.probe.as_dict(),
        mime_types=[
            MimeTypeBindingResponse(pattern=binding.pattern, adapter=binding.adapter)
            for binding in resolver.bindings
        ],
        bound=resolver.registry.bindings(),
    )
