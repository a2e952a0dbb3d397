from typing import Optional

from fastapi import status


class AssistantError(Exception):
    """Base class for every failure the assistant reports to its caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"success": False, "error": self.message}


class UpstreamAPIError(AssistantError):
    """An external HTTP service answered non-2xx or could not be reached."""

    def __init__(
        self,
        service: str,
        status_code: Optional[int] = None,
        body: str = "",
        message: Optional[str] = None,
    ):
        self.service = service
        self.upstream_status = status_code
        self.body = body
        self.status_code = status_code or status.HTTP_502_BAD_GATEWAY
        if message is None:
            if status_code is not None:
                message = f"{service} request failed with status {status_code}"
            else:
                message = f"{service} request failed: {body}"
        super().__init__(message)


class MalformedResponseError(UpstreamAPIError):
    """An external service answered 2xx with a body we could not parse."""

    def __init__(self, service: str, body: str = ""):
        super().__init__(
            service,
            status_code=None,
            body=body,
            message=f"{service} returned a malformed response",
        )


class ToolExecutionError(AssistantError):
    def __init__(self, tool_name: str, message: str):
        self.tool_name = tool_name
        super().__init__(message)


class UnknownToolError(ToolExecutionError):
    def __init__(self, tool_name: str):
        super().__init__(tool_name, f"Unknown tool: {tool_name}")


class InvalidToolArgumentsError(ToolExecutionError):
    status_code = status.HTTP_400_BAD_REQUEST


class MissingCredentialError(AssistantError):
    def __init__(self, setting_name: str):
        self.setting_name = setting_name
        super().__init__(f"{setting_name} environment variable is not set")


class TranscriptionError(AssistantError):
    pass


class InvalidAudioError(TranscriptionError):
    status_code = status.HTTP_400_BAD_REQUEST


class TranscriptionUpstreamError(TranscriptionError):
    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, last_error: str):
        self.last_error = last_error
        super().__init__(
            "Transcription failed: all format attempts failed. "
            f"Last error: {last_error}"
        )


class OrchestrationError(AssistantError):
    """The chat endpoint answered, but not with a usable first choice."""

    status_code = status.HTTP_502_BAD_GATEWAY
