"""Async subprocess execution for package manager commands."""

import asyncio
import shutil
import time

from zerofriction.utils.logging import get_subprocess_env, logger


async def run_command_async(cmd: list[str], cwd: str, timeout: float = 300) -> dict:
    """Execute a subprocess using asyncio memory pipes.

    The child is killed when the timeout expires or the awaiting task is
    cancelled, so an install can never outlive its caller.

    Args:
        cmd: Command array to execute (first element is resolved on PATH)
        cwd: Working directory
        timeout: Maximum execution time in seconds

    Returns:
        Dict with success, returncode, stdout, stderr, elapsed, timed_out
    """
    start_time = time.time()

    # npm/yarn/pnpm ship as .cmd shims on Windows
    executable = shutil.which(cmd[0])
    if executable is None:
        return {
            "success": False,
            "returncode": -1,
            "stdout": "",
            "stderr": f"Executable not found: {cmd[0]}",
            "elapsed": time.time() - start_time,
            "timed_out": False,
        }

    try:
        process = await asyncio.create_subprocess_exec(
            executable,
            *cmd[1:],
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
            env=get_subprocess_env(),
        )
    except OSError as e:
        return {
            "success": False,
            "returncode": -1,
            "stdout": "",
            "stderr": f"Subprocess error: {e}",
            "elapsed": time.time() - start_time,
            "timed_out": False,
        }

    try:
        stdout_data, stderr_data = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except TimeoutError:
        logger.warning("Command timed out after {timeout}s: {cmd}", timeout=timeout, cmd=cmd[0])
        process.kill()
        await process.wait()
        return {
            "success": False,
            "returncode": -1,
            "stdout": "",
            "stderr": f"Command timed out after {timeout}s",
            "elapsed": time.time() - start_time,
            "timed_out": True,
        }
    except asyncio.CancelledError:
        process.kill()
        await process.wait()
        raise

    return {
        "success": process.returncode == 0,
        "returncode": process.returncode,
        "stdout": stdout_data.decode("utf-8", errors="replace"),
        "stderr": stderr_data.decode("utf-8", errors="replace"),
        "elapsed": time.time() - start_time,
        "timed_out": False,
    }
