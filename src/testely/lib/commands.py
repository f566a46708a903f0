# src/testely/lib/commands.py
import logging
from pathlib import Path
from typing import Optional

from testely.lib.context import Context
from testely.lib.domain import Direction, Document
from testely.lib.errors import NoProjectFound, NoStrategy, TestelyError, UnsupportedScheme

logger = logging.getLogger(__name__)

ERRORS = {
    "UNTITLED_DOCUMENT": "Untitled document cannot be opened as a test file.",
    "ONLY_LOCAL_FILES": "Only local files can be opened as test files.",
    "FAILED_TO_OPEN": "Failed to open {direction} file.",
    "NO_PROJECT_FOUND": "No project found for this file.",
}


def check_document(doc: Document) -> None:
    """Reject documents that are not saved local files"""
    if doc.scheme != "file":
        raise UnsupportedScheme(ERRORS["ONLY_LOCAL_FILES"])
    if doc.is_untitled:
        raise UnsupportedScheme(ERRORS["UNTITLED_DOCUMENT"])


def open_counterpart(
    doc: Document, context: Context, direction: Optional[Direction] = None
) -> Optional[Path]:
    """Resolve the file to open for `doc`.

    With no direction the counterpart is chosen from the file itself: tests
    open their source, sources open their test. With a direction, a file that
    already is what was asked for resolves to itself.

    Returns:
        The path to open, or None if the failure was reported to the user
    """
    logger.info(f"Opening counterpart of {doc.path}")
    wanted = direction

    try:
        check_document(doc)

        project = context.registry.resolve(doc)
        if project is None:
            raise NoProjectFound(ERRORS["NO_PROJECT_FOUND"])

        is_test = project.is_test_file(doc.path)
        if wanted is None:
            wanted = Direction.SOURCE if is_test else Direction.TEST

        if wanted is Direction.SOURCE:
            if not is_test:
                logger.debug(f"Already a source file: {doc.path}")
                return doc.path
            return project.get_source_file_path(doc.path)

        if is_test:
            logger.debug(f"Already a test file: {doc.path}")
            return doc.path
        return project.get_test_file_path(doc.path)

    except NoStrategy as e:
        logger.error(f"Resolution table is incomplete: {e}")
        context.notifier.error(ERRORS["FAILED_TO_OPEN"].format(direction=(wanted or Direction.TEST).value))
    except TestelyError as e:
        logger.debug(f"Failed to open counterpart of {doc.path}: {e}")
        context.notifier.error(str(e))
    except OSError as e:
        logger.error(f"Failed to open counterpart of {doc.path}: {e}")
        context.notifier.error(f"{ERRORS['FAILED_TO_OPEN'].format(direction=(wanted or Direction.TEST).value)} {e}")
    return None


def open_test(doc: Document, context: Context) -> Optional[Path]:
    return open_counterpart(doc, context, Direction.TEST)


def open_source(doc: Document, context: Context) -> Optional[Path]:
    return open_counterpart(doc, context, Direction.SOURCE)
