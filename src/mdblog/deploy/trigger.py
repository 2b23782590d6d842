"""Webhook signature verification and the refresh/shutdown coordinator"""

import hashlib
import hmac
import json
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
from pathlib import Path
from typing import Optional

from loguru import logger

from mdblog.corpus.collection import PostCollection, Snapshot
from mdblog.deploy.shutdown import Shutdown
from mdblog.errors import (
    MalformedPayload,
    MalformedSignature,
    MissingSignature,
    NoSecretConfigured,
    SignatureMismatch,
)


SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="
COMPLETED = "completed"


class Action(str, Enum):
    """What a verified trigger asks for"""
    shutdown = "shutdown"
    acknowledge = "acknowledge"


class TriggerMode(str, Enum):
    """Per-deployment meaning of a completed trigger; never both"""
    shutdown = "shutdown"     # exit and let the orchestrator restart with new content
    refresh = "refresh"       # re-scan the content directory in place


def sign(body: bytes, secret: str) -> str:
    """Hex HMAC-SHA256 of body, as carried after 'sha256=' in the header."""
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def verify_signature(signature_header: Optional[str], raw_body: bytes, configured_secret: Optional[str]) -> None:
    """Raise an AuthError subclass unless the header signs raw_body with the secret."""
    if signature_header is None:
        raise MissingSignature()
    header = signature_header.strip()
    if not header.startswith(SIGNATURE_PREFIX):
        raise MalformedSignature()
    if not configured_secret:
        raise NoSecretConfigured()

    expected = sign(raw_body, configured_secret)
    provided = header[len(SIGNATURE_PREFIX):]
    if not hmac.compare_digest(expected.encode("ascii"), provided.encode("utf-8")):
        raise SignatureMismatch()


def is_completed(payload: dict) -> bool:
    return payload.get("action") == COMPLETED or payload.get("status") == COMPLETED


def handle_trigger(signature_header: Optional[str], raw_body: bytes, configured_secret: Optional[str]) -> Action:
    """Verify the trigger and decide what it asks for."""
    verify_signature(signature_header, raw_body, configured_secret)
    try:
        payload = json.loads(raw_body)
    except ValueError as e:
        raise MalformedPayload() from e
    if not isinstance(payload, dict):
        raise MalformedPayload()
    return Action.shutdown if is_completed(payload) else Action.acknowledge


class Coordinator:
    """Maps verified triggers onto the deployment's single strategy.

    In shutdown mode a completed trigger fires the Shutdown handle. In refresh
    mode it queues a re-scan on a one-thread executor, off the request path.
    """

    def __init__(
        self,
        mode: TriggerMode,
        secret: Optional[str] = None,
        shutdown: Optional[Shutdown] = None,
        collection: Optional[PostCollection] = None,
        directory: Optional[Path] = None,
        ):
        if mode is TriggerMode.shutdown and shutdown is None:
            raise ValueError("shutdown mode needs a Shutdown handle")
        if mode is TriggerMode.refresh and (collection is None or directory is None):
            raise ValueError("refresh mode needs a collection and a content directory")
        self.mode = mode
        self._secret = secret
        self._shutdown = shutdown
        self._collection = collection
        self._directory = directory
        self._executor: Optional[ThreadPoolExecutor] = None
        if mode is TriggerMode.refresh:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mdblog-refresh")

    def handle(self, signature_header: Optional[str], raw_body: bytes) -> Action:
        """Verify, then dispatch. TriggerErrors propagate to the caller."""
        action = handle_trigger(signature_header, raw_body, self._secret)
        self.dispatch(action)
        return action

    def dispatch(self, action: Action) -> Optional[Future]:
        if action is not Action.shutdown:
            logger.debug("Trigger acknowledged, nothing to do")
            return None
        if self.mode is TriggerMode.shutdown:
            logger.info("Deploy completed; signalling shutdown")
            self._shutdown.notify()
            return None
        logger.info("Deploy completed; refreshing posts from {}", self._directory)
        return self._executor.submit(self._refresh)

    def _refresh(self) -> Snapshot:
        try:
            return self._collection.refresh(self._directory)
        except Exception:
            # nobody waits on the future when the trigger came over HTTP
            logger.exception("Refresh failed, keeping previous posts")
            raise

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
