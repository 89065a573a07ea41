import asyncio
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends

from tales.core.deps import GenerationClients, get_clients, get_registry
from tales.services.session_registry import SessionRegistry

router = APIRouter()


@router.get("/status")
async def check_system_status(
    clients: Annotated[GenerationClients, Depends(get_clients)],
    registry: Annotated[SessionRegistry, Depends(get_registry)],
) -> Dict[str, Any]:
    """
    Checks the health of the three upstream models:
    - story text
    - speech synthesis
    - illustration
    """
    results = {
        "story_model": "unknown",
        "speech_model": "unknown",
        "illustration_model": "unknown",
    }

    # Parallel execution
    async def check_service(name: str, client: Any):
        try:
            is_healthy = await client.check_health()
            results[name] = "ok" if is_healthy else "error"
        except Exception as e:
            results[name] = f"error: {str(e)}"

    await asyncio.gather(
        check_service("story_model", clients.story),
        check_service("speech_model", clients.speech),
        check_service("illustration_model", clients.illustration),
    )

    overall_status = "ok" if all(v == "ok" for v in results.values()) else "degraded"

    return {
        "status": overall_status,
        "services": results,
        "open_sessions": len(registry),
    }
