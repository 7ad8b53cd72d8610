import asyncio
import socket
from datetime import datetime, timezone

import aiohttp

from .output import print_info, print_warn, print_error


async def post_status_update(hook_url: str, status_data: dict) -> dict:
    """Send status update to webhook with retry logic"""
    if not hook_url:
        return {"success": True, "status_url": ""}

    step = status_data.get("details", {}).get("step", "unknown")
    print_info(f"Sending status update for step: {step}")

    # Retry configuration
    max_retries = 3
    retry_delay = 2

    for attempt in range(1, max_retries + 1):
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    hook_url,
                    json=status_data,
                    timeout=aiohttp.ClientTimeout(total=30)
                ) as response:
                    if response.status == 200:
                        try:
                            data = await response.json(content_type=None)
                        except ValueError:
                            data = None
                        status_url = data.get("status_url", "") if isinstance(data, dict) else ""
                        return {
                            "success": True,
                            "status_url": status_url,
                            "response": data
                        }
                    error_msg = f"HTTP {response.status}"
        except (asyncio.TimeoutError, aiohttp.ClientError) as e:
            error_msg = str(e) or type(e).__name__
        except Exception as e:
            error_msg = f"Unexpected error: {str(e)}"

        if attempt < max_retries:
            print_warn(f"Status update failed (attempt {attempt}/{max_retries}): {error_msg}")
            await asyncio.sleep(retry_delay * attempt)
        else:
            print_error(f"Status update failed after {max_retries} attempts: {error_msg}")
            return {
                "success": False,
                "error": error_msg,
                "status_url": ""
            }


def notify(hook_url, status, step, message=""):
    if not hook_url:
        return {"success": True, "status_url": ""}
    status_data = {
        "host": socket.gethostname(),
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "details": {
            "step": step,
            "message": message
        }
    }
    try:
        return asyncio.run(post_status_update(hook_url, status_data))
    except Exception as e:
        print_warn(f"Status update for step {step} skipped: {e}")
        return {"success": False, "error": str(e), "status_url": ""}
