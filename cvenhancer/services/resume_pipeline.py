"""
End-to-end resume pipeline: validate → extract → enhance, with explicit status.
"""

import threading
from typing import Any, Dict, Optional

from pydantic import ValidationError

from cvenhancer.config.settings import Settings
from cvenhancer.exceptions import (
    ConfigurationError,
    FileValidationError,
    PipelineBusyError,
    ResponseFormatError,
)
from cvenhancer.models.document import UploadedFile
from cvenhancer.models.resume import CanonicalResumeData
from cvenhancer.models.status import ProcessingStatus, check_transition, is_busy
from cvenhancer.services.ai_service import AIService
from cvenhancer.services.config_repository import ConfigRepository
from cvenhancer.services.document_parser import DocumentParser
from cvenhancer.services.resume_view import ResumeView, build_resume_view
from cvenhancer.utils.file_validation import validate_file
from cvenhancer.utils.json_extraction import dedupe_experience
from cvenhancer.utils.logger import get_logger

logger = get_logger(__name__)


class ResumePipeline:
    """
    Drives one resume through the pipeline and tracks its status.

    Status moves idle → parsing → enhancing → completed, or to error from
    parsing/enhancing. Only one run may be in flight; a second caller gets
    PipelineBusyError instead of waiting.
    """

    def __init__(
        self,
        settings: Settings,
        repository: ConfigRepository,
        ai_service: Optional[AIService] = None,
        parser: Optional[DocumentParser] = None
    ):
        """
        Initialize pipeline.

        Args:
            settings: Application settings
            repository: Persisted provider/render settings
            ai_service: Enhancement orchestrator
            parser: Document extractor
        """
        self.settings = settings
        self.repository = repository
        self.ai_service = ai_service or AIService(settings)
        self.parser = parser or DocumentParser()

        self.status = ProcessingStatus.IDLE
        self.error = ""
        self.resume_data: Optional[CanonicalResumeData] = None
        self._run_lock = threading.Lock()

    def _set_status(self, target: ProcessingStatus) -> None:
        check_transition(self.status, target)
        logger.info(f"Status: {self.status.value} -> {target.value}")
        self.status = target

    def _fail(self, exc: Exception) -> None:
        self.error = str(exc) or exc.__class__.__name__
        self._set_status(ProcessingStatus.ERROR)
        logger.error(f"❌ Processing error: {self.error}")

    def snapshot(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "error": self.error,
            "hasResume": self.resume_data is not None,
            "busy": is_busy(self.status),
        }

    def process_upload(self, uploaded: UploadedFile, job_title: Optional[str] = None) -> CanonicalResumeData:
        """
        Run an upload through validation, extraction, and enhancement.

        Args:
            uploaded: File as uploaded by the user
            job_title: Optional target role

        Returns:
            Enhanced resume, which also becomes ``self.resume_data``

        Raises:
            PipelineBusyError: Another run is in flight
            CVEnhancerError: Any pipeline failure (status ends at ``error``)
        """
        if not self._run_lock.acquire(blocking=False):
            raise PipelineBusyError("A resume is already being processed")

        try:
            self._set_status(ProcessingStatus.PARSING)
            self.error = ""

            try:
                resume = self._run(uploaded, job_title)
            except Exception as e:
                self._fail(e)
                raise

            self.resume_data = resume
            self._set_status(ProcessingStatus.COMPLETED)
            return resume
        finally:
            self._run_lock.release()

    def _run(self, uploaded: UploadedFile, job_title: Optional[str]) -> CanonicalResumeData:
        validation = validate_file(
            uploaded.size, uploaded.content_type, uploaded.filename, self.settings.max_upload_size
        )
        if not validation.is_valid:
            raise FileValidationError(validation.error)

        # Config is read once per run; later edits apply to the next upload
        ai_config = self.repository.load_ai_config()
        if ai_config is None:
            raise ConfigurationError("Please configure AI provider settings first")
        ai_config.require_api_key()
        render_config = self.repository.load_resume_config()

        if job_title is not None:
            self.repository.update_app_state(job_title=job_title)

        parsed = self.parser.parse_file(uploaded, validation.file_type, ai_config)

        self._set_status(ProcessingStatus.ENHANCING)
        return self.ai_service.enhance_resume(parsed, ai_config, job_title or None, render_config)

    def load_snapshot(self, data: Dict[str, Any], filename: Optional[str] = None) -> CanonicalResumeData:
        """
        Show a previously saved resume without running the pipeline.

        Raises:
            PipelineBusyError: A run is in flight
            ResponseFormatError: Data does not match the resume schema
        """
        if not self._run_lock.acquire(blocking=False):
            raise PipelineBusyError("A resume is already being processed")

        try:
            if not isinstance(data, dict):
                raise ResponseFormatError("Snapshot must contain a JSON object")
            try:
                resume = CanonicalResumeData.model_validate(dedupe_experience(data))
            except ValidationError as e:
                raise ResponseFormatError(f"Snapshot does not match the resume schema: {e}") from e

            self._set_status(ProcessingStatus.COMPLETED)
            self.resume_data = resume
            self.error = ""
            if filename:
                self.repository.update_app_state(selected_json_file=filename)
            return resume
        finally:
            self._run_lock.release()

    def current_view(self) -> Optional[ResumeView]:
        if self.resume_data is None:
            return None
        return build_resume_view(self.resume_data, self.repository.load_resume_config())

    def reset(self) -> None:
        """Back to idle. Refused while a run is in flight."""
        if not self._run_lock.acquire(blocking=False):
            raise PipelineBusyError("A resume is already being processed")
        try:
            self.status = ProcessingStatus.IDLE
            self.error = ""
            self.resume_data = None
        finally:
            self._run_lock.release()

