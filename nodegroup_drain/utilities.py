#!/usr/bin/env python3
"""Utilities module for the Node Group Drain Tool."""

import json
import subprocess
import time

from .exceptions import KubectlCommandError

# Seconds before a single kubectl invocation is abandoned
COMMAND_TIMEOUT = 60

# Connection flags prepended to every kubectl invocation, see configure_kubectl()
_global_flags = []


def configure_kubectl(kubeconfig=None, context=None, request_timeout=None):
    """
    Set the connection options used by every subsequent kubectl call.

    Args:
        kubeconfig: Path to a kubeconfig file (optional)
        context: Name of the kubeconfig context to use (optional)
        request_timeout: Per-request timeout passed to the API server, e.g. "30s" (optional)

    Returns:
        list: The flags that will be prepended to each command
    """
    flags = []
    if kubeconfig:
        flags.extend(["--kubeconfig", kubeconfig])
    if context:
        flags.extend(["--context", context])
    if request_timeout:
        flags.append(f"--request-timeout={request_timeout}")

    _global_flags[:] = flags
    return list(flags)


def build_kubectl_command(command):
    """Build the full kubectl argument list for subprocess.run"""
    return ["kubectl", *_global_flags, *command]


def _is_retryable_error(stderr_text):
    """Check if the error is worth retrying."""
    if not stderr_text:
        return False

    # Common API server connectivity issues that warrant retry
    retryable_patterns = [
        "keepalive ping failed",
        "connection refused",
        "timeout",
        "connection reset",
        "temporary failure in name resolution",
        "service unavailable",
        "internal server error",
        "too many requests",
        "server is currently unable to handle the request",
        "context deadline exceeded",
        "tls handshake timeout",
    ]

    stderr_lower = stderr_text.lower()
    return any(pattern in stderr_lower for pattern in retryable_patterns)


def _log_retry_attempt(printer, attempt, max_retries, exec_command):
    """Log retry attempt information."""
    if not printer:
        return
    if attempt == 0:
        printer.print_action(f"Executing kubectl command: {' '.join(exec_command)}")
    else:
        printer.print_info(f"Retry attempt {attempt}/{max_retries}: {' '.join(exec_command)}")


def _handle_command_success(result, json_output, attempt, exec_command, printer):
    """Handle successful command execution."""
    if attempt > 0 and printer:
        printer.print_info(f"Command succeeded on retry attempt {attempt}")
    if json_output:
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise KubectlCommandError(exec_command, f"failed to parse JSON output: {e}") from e
    return result.stdout.strip()


def _should_retry(error_msg, attempt, max_retries, retry_delay, printer):
    """Decide whether a failed attempt is retried, sleeping before the next one."""
    if attempt < max_retries and _is_retryable_error(error_msg):
        if printer:
            printer.print_warning(f"Command failed with retryable error, waiting {retry_delay}s before retry...")
            printer.print_info(f"Error: {error_msg.strip()}")
        time.sleep(retry_delay)
        return True
    return False


def execute_kubectl_command(
    command,
    json_output=False,
    input_data=None,
    printer=None,
    max_retries=3,
    retry_delay=2,
    timeout=COMMAND_TIMEOUT,
):
    """
    Execute a kubectl command with retry logic for API failures.

    Args:
        command: List of command arguments to execute (excluding 'kubectl')
        json_output: If True, parse stdout as JSON
        input_data: Optional dict or string written to the command's stdin
        printer: Printer instance for output
        max_retries: Maximum number of retry attempts (default: 3)
        retry_delay: Seconds to wait between retries (default: 2)
        timeout: Seconds before a single attempt is abandoned

    Returns:
        str or dict: Command output as string, or parsed JSON dict if json_output=True

    Raises:
        KubectlCommandError: If the command fails with a non-retryable error,
            retries are exhausted, or kubectl cannot be started
    """
    exec_command = build_kubectl_command(command)
    if isinstance(input_data, (dict, list)):
        input_data = json.dumps(input_data)

    last_error = None
    for attempt in range(max_retries + 1):  # +1 for the initial attempt
        _log_retry_attempt(printer, attempt, max_retries, exec_command)
        try:
            result = subprocess.run(exec_command, input=input_data, capture_output=True, text=True, timeout=timeout)
        except subprocess.TimeoutExpired:
            last_error = f"Command timeout: no response after {timeout} seconds"
        except OSError as e:
            last_error = str(e)
        else:
            if result.returncode == 0:
                return _handle_command_success(result, json_output, attempt, exec_command, printer)
            last_error = result.stderr or f"exit status {result.returncode}"

        if not _should_retry(last_error, attempt, max_retries, retry_delay, printer):
            break
        retry_delay *= 1.5  # Exponential backoff with factor of 1.5

    if printer:
        printer.print_debug(f"Command failed: {last_error.strip()}")
    raise KubectlCommandError(exec_command, last_error)


def format_runtime(start_time, end_time):
    """
    Format runtime duration in a human-readable way.

    Args:
        start_time (float): Start timestamp from time.time()
        end_time (float): End timestamp from time.time()

    Returns:
        str: Formatted runtime string (e.g., "5m 23s", "1h 15m 30s")
    """
    total_seconds = int(end_time - start_time)

    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60

    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    elif minutes > 0:
        return f"{minutes}m {seconds}s"
    else:
        return f"{seconds}s"


def cordon_status(desired):
    """Verb describing a cordon toggle"""
    return "cordon" if desired else "uncordon"


def pod_key(pod):
    """namespace/name of a pod object"""
    metadata = pod.get("metadata", {})
    return f"{metadata.get('namespace', 'default')}/{metadata.get('name', '')}"
