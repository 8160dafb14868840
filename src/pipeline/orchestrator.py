"""Remote Job Orchestrator - Drives one remote generation job to completion."""

import logging
import time
from typing import Callable

from src.errors import RemoteJobError
from src.models.quiz import JobRunState, RemoteJobHandle
from src.pipeline.service import GenerationService

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.5
DEFAULT_TIMEOUT = 120.0


class RemoteJobOrchestrator:
    """
    Run a one-shot retrieval-augmented generation job.

    Each call to `run` uploads the corpus, defines a job, opens a
    conversation, posts the task, runs the job, polls it to a terminal state
    and reads back the reply. The job definition (and the uploaded corpus,
    when `delete_uploaded_files` is set) is deleted before `run` returns,
    whatever the outcome.

    The orchestrator holds no per-run state, so one instance can serve
    concurrent requests.

    Args:
        service: Remote generation service
        poll_interval: Seconds to wait between two status checks
        timeout: Seconds after run submission before the run counts as expired
        delete_uploaded_files: Also delete the uploaded corpus during cleanup
        sleep: Function used to wait between polls
        clock: Monotonic clock used for the timeout
    """

    def __init__(
        self,
        service: GenerationService,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = DEFAULT_TIMEOUT,
        delete_uploaded_files: bool = True,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.service = service
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.delete_uploaded_files = delete_uploaded_files
        self._sleep = sleep
        self._clock = clock

    def run(self, corpus_text: str, task_spec: str, source_label: str) -> str:
        """
        Execute the job and return the generator's raw text output.

        Args:
            corpus_text: Plain text of the source document
            task_spec: Task specification posted as the user message
            source_label: Name of the source document, used to name the upload

        Returns:
            Text content of the assistant's reply

        Raises:
            RemoteJobError: If any step fails, the run ends in a state other
                than completed, the timeout is reached or no reply is found
        """
        handle = RemoteJobHandle()
        try:
            handle.corpus_file_id = self.service.upload_corpus(
                corpus_text, corpus_filename(source_label)
            )
            logger.info("Uploaded corpus %s", handle.corpus_file_id)

            handle.job_definition_id = self.service.create_job_definition()
            logger.info("Created job definition %s", handle.job_definition_id)

            handle.conversation_id = self.service.create_conversation()
            self.service.attach_message(
                handle.conversation_id, task_spec, handle.corpus_file_id
            )
            logger.info("Posted task to conversation %s", handle.conversation_id)

            handle.run_id = self.service.start_run(
                handle.conversation_id, handle.job_definition_id
            )
            logger.info("Started run %s", handle.run_id)

            state, status = self._poll_run(handle)
            if state is not JobRunState.COMPLETED:
                raise RemoteJobError(f"Run ended with status: {status}", status=status)

            return self._read_reply(handle)
        finally:
            self._cleanup(handle)

    def _poll_run(self, handle: RemoteJobHandle) -> tuple[JobRunState, str]:
        """Poll the run until it is terminal or the timeout is reached."""
        deadline = self._clock() + self.timeout
        while True:
            status = self.service.get_run_status(handle.conversation_id, handle.run_id)
            state = JobRunState.from_remote(status)
            logger.debug("Run %s status: %s", handle.run_id, status)
            if state.is_terminal:
                return state, status

            remaining = deadline - self._clock()
            if remaining <= 0:
                break
            self._sleep(min(self.poll_interval, remaining))

        logger.warning("Run %s timed out after %.1fs", handle.run_id, self.timeout)
        try:
            self.service.cancel_run(handle.conversation_id, handle.run_id)
        except Exception:
            logger.warning("Could not cancel run %s", handle.run_id, exc_info=True)
        expired = JobRunState.EXPIRED.value
        raise RemoteJobError(f"Run ended with status: {expired}", status=expired)

    def _read_reply(self, handle: RemoteJobHandle) -> str:
        """Text of the most recent assistant message in the conversation."""
        messages = self.service.list_messages(handle.conversation_id)
        reply = next((m for m in messages if m.role == "assistant"), None)
        if reply is None or reply.text is None:
            raise RemoteJobError("no valid response")
        return reply.text

    def _cleanup(self, handle: RemoteJobHandle) -> None:
        """Delete what this run created. Failures are logged, never raised."""
        if handle.job_definition_id is not None:
            try:
                self.service.delete_job_definition(handle.job_definition_id)
                logger.info("Deleted job definition %s", handle.job_definition_id)
            except Exception:
                logger.warning(
                    "Failed to delete job definition %s",
                    handle.job_definition_id,
                    exc_info=True,
                )

        if self.delete_uploaded_files and handle.corpus_file_id is not None:
            try:
                self.service.delete_corpus(handle.corpus_file_id)
            except Exception:
                logger.warning(
                    "Failed to delete corpus %s", handle.corpus_file_id, exc_info=True
                )


def corpus_filename(source_label: str) -> str:
    """Name under which the corpus of a source document is uploaded."""
    return f"source-for-{source_label or 'document'}.txt"
