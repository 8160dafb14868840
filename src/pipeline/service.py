"""
Remote generation service.

`GenerationService` declares one method per lifecycle step of a remote
reasoning job so the orchestrator can run against any implementation.
`OpenAIAssistantsService` implements it on the OpenAI Assistants API:
corpus = file, job definition = assistant, conversation = thread.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Protocol

from openai import OpenAI, OpenAIError

from src.config.settings import Settings, get_settings
from src.errors import RemoteJobError
from src.models.quiz import ConversationMessage

logger = logging.getLogger(__name__)

FILE_SEARCH_TOOL = {"type": "file_search"}


class GenerationService(Protocol):
    """Capabilities the orchestrator needs from the remote generator."""

    def upload_corpus(self, text: str, filename: str) -> str:
        """Upload a named text artifact and return its id."""
        ...

    def delete_corpus(self, file_id: str) -> None:
        """Delete an uploaded artifact."""
        ...

    def create_job_definition(self) -> str:
        """Create a retrieval-enabled, JSON-output job definition and return its id."""
        ...

    def delete_job_definition(self, job_id: str) -> None:
        """Delete a job definition."""
        ...

    def create_conversation(self) -> str:
        """Open an empty conversation and return its id."""
        ...

    def attach_message(self, conversation_id: str, content: str, file_id: str) -> None:
        """Post a user message with the uploaded artifact attached."""
        ...

    def start_run(self, conversation_id: str, job_id: str) -> str:
        """Start a run of the job definition and return its id."""
        ...

    def get_run_status(self, conversation_id: str, run_id: str) -> str:
        """Return the raw status string of a run."""
        ...

    def cancel_run(self, conversation_id: str, run_id: str) -> None:
        """Ask the service to stop a run."""
        ...

    def list_messages(self, conversation_id: str) -> list[ConversationMessage]:
        """Return the conversation's messages, newest first."""
        ...


@contextmanager
def remote_step(step: str) -> Iterator[None]:
    """Re-raise SDK errors from one lifecycle step as RemoteJobError."""
    try:
        yield
    except OpenAIError as e:
        raise RemoteJobError(f"{step} failed: {e}") from e


class OpenAIAssistantsService:
    """GenerationService backed by the OpenAI Assistants API."""

    def __init__(self, client: OpenAI | None = None, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> OpenAI:
        """OpenAI client, built from settings on first use."""
        if self._client is None:
            if not self.settings.openai_api_key:
                raise RemoteJobError("OPENAI_API_KEY environment variable not set")
            self._client = OpenAI(
                api_key=self.settings.openai_api_key,
                timeout=self.settings.request_timeout_seconds,
                max_retries=self.settings.max_retries,
            )
        return self._client

    def upload_corpus(self, text: str, filename: str) -> str:
        with remote_step("Corpus upload"):
            uploaded = self.client.files.create(
                file=(filename, text.encode("utf-8"), "text/plain"),
                purpose="assistants",
            )
        return uploaded.id

    def delete_corpus(self, file_id: str) -> None:
        with remote_step("Corpus deletion"):
            self.client.files.delete(file_id)

    def create_job_definition(self) -> str:
        with remote_step("Job definition"):
            assistant = self.client.beta.assistants.create(
                name=self.settings.job_name,
                instructions=self.settings.job_instructions,
                model=self.settings.model_name,
                tools=[FILE_SEARCH_TOOL],
                response_format={"type": "json_object"},
            )
        return assistant.id

    def delete_job_definition(self, job_id: str) -> None:
        with remote_step("Job definition deletion"):
            self.client.beta.assistants.delete(job_id)

    def create_conversation(self) -> str:
        with remote_step("Conversation creation"):
            thread = self.client.beta.threads.create()
        return thread.id

    def attach_message(self, conversation_id: str, content: str, file_id: str) -> None:
        with remote_step("Message creation"):
            self.client.beta.threads.messages.create(
                conversation_id,
                role="user",
                content=content,
                attachments=[{"file_id": file_id, "tools": [FILE_SEARCH_TOOL]}],
            )

    def start_run(self, conversation_id: str, job_id: str) -> str:
        with remote_step("Run submission"):
            run = self.client.beta.threads.runs.create(
                conversation_id,
                assistant_id=job_id,
            )
        return run.id

    def get_run_status(self, conversation_id: str, run_id: str) -> str:
        with remote_step("Run status check"):
            run = self.client.beta.threads.runs.retrieve(run_id, thread_id=conversation_id)
        if run.status == "failed" and run.last_error is not None:
            logger.warning("Run %s failed: %s", run_id, run.last_error.message)
        return run.status

    def cancel_run(self, conversation_id: str, run_id: str) -> None:
        with remote_step("Run cancellation"):
            self.client.beta.threads.runs.cancel(run_id, thread_id=conversation_id)

    def list_messages(self, conversation_id: str) -> list[ConversationMessage]:
        with remote_step("Message listing"):
            page = self.client.beta.threads.messages.list(conversation_id, order="desc")

        messages = []
        for message in page.data:
            text = None
            if message.content and message.content[0].type == "text":
                text = message.content[0].text.value
            messages.append(ConversationMessage(role=message.role, text=text))
        return messages
