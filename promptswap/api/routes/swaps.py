"""
Swap action endpoints.

Each route forwards to the shared swap action handler and returns whatever it
produces; error handling belongs to the handler and the global exception handlers.
"""
import time
from fastapi import APIRouter, Depends, Request
from starlette.responses import Response
from promptswap.api.deps import SwapActionHandler, get_swap_action_handler
from promptswap.models.enums import SwapAction
from promptswap.utils import log_business_event, log_performance

router = APIRouter()

async def _dispatch(
    request: Request,
    swap_id: str,
    action: SwapAction,
    handle_swap_action: SwapActionHandler
) -> Response:
    start_time = time.time()

    log_business_event(
        event_type="swap_action_requested",
        details={"swap_id": swap_id, "action": action.value}
    )

    response = await handle_swap_action(request, swap_id, action)

    log_performance(
        f"swap_{action.value}",
        (time.time() - start_time) * 1000,
        swap_id=swap_id,
        status_code=response.status_code
    )
    return response

@router.post(
    "/{swap_id}/cancel",
    summary="Cancel a swap",
    response_class=Response
)
async def cancel_swap(
    swap_id: str,
    request: Request,
    handle_swap_action: SwapActionHandler = Depends(get_swap_action_handler)
) -> Response:
    """Cancel the swap through the shared action handler."""
    return await _dispatch(request, swap_id, SwapAction.CANCEL, handle_swap_action)

@router.post(
    "/{swap_id}/accept",
    summary="Accept a swap",
    response_class=Response
)
async def accept_swap(
    swap_id: str,
    request: Request,
    handle_swap_action: SwapActionHandler = Depends(get_swap_action_handler)
) -> Response:
    return await _dispatch(request, swap_id, SwapAction.ACCEPT, handle_swap_action)
