"""Alfa report generation endpoint."""

import asyncio
import logging
import sqlite3
import time
from pathlib import Path
from typing import Annotated

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from fastapi.responses import Response

from api.dependencies import error_detail, get_current_user, get_db, get_template_path
from api.logging import RequestLog, log_request
from api.models.responses import ErrorCodes
from core.config import MAX_UPLOAD_SIZE_BYTES
from models.users import User, display_name
from services.alfa_report import (
    XLSX_MEDIA_TYPE,
    InvalidWorkbookError,
    MalformedUploadError,
    NoFileProvidedError,
    NoMatchingDataError,
    TemplateMissingError,
    generate_alfa_report,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tempestive", tags=["tempestive"])

ENDPOINT = "/api/tempestive/alfasReports"
ALLOWED_EXTENSIONS = (".xlsx", ".xlsm")


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _fail(request_log: RequestLog, status_code: int, error: str, code: str, details: list[str]) -> HTTPException:
    request_log.status_code = status_code
    request_log.error_code = code
    request_log.error_message = error
    for detail in details:
        request_log.details.append(("validation_error", detail))
    return HTTPException(status_code=status_code, detail=error_detail(error, code, details))


@router.post("/alfasReports")
async def generate_alfa_report_endpoint(
    request: Request,
    month: Annotated[int, Form(description="Report month (1-12)")],
    year: Annotated[int, Form(description="Report year")],
    file: Annotated[
        UploadFile | None, File(description="Excel workbook with dated timesheet rows")
    ] = None,
    user: User = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
    template_path: Path = Depends(get_template_path),
):
    """
    Generate the monthly alfa report for the authenticated user.

    The employee name on the report always comes from the session, never from
    the form.
    """
    start_time = time.time()

    request_log = RequestLog(
        endpoint=ENDPOINT,
        method="POST",
        client_ip=get_client_ip(request),
        user_id=user["id"],
        file_name=file.filename if file else None,
        month=month,
        year=year,
    )

    try:
        if not file or not file.filename:
            raise _fail(request_log, status.HTTP_400_BAD_REQUEST, "Nessun file caricato.", ErrorCodes.INVALID_REQUEST, [])

        if not 1 <= month <= 12:
            raise _fail(
                request_log,
                status.HTTP_400_BAD_REQUEST,
                "Invalid month",
                ErrorCodes.INVALID_REQUEST,
                [f"Expected 1-12, received: {month}"],
            )

        if not file.filename.lower().endswith(ALLOWED_EXTENSIONS):
            raise _fail(
                request_log,
                status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                "File is not an Excel workbook",
                ErrorCodes.UNSUPPORTED_MEDIA_TYPE,
                [f"Received: {file.filename}"],
            )

        file_content = await file.read()
        request_log.file_size_bytes = len(file_content)

        if len(file_content) > MAX_UPLOAD_SIZE_BYTES:
            max_mb = MAX_UPLOAD_SIZE_BYTES // (1024 * 1024)
            raise _fail(
                request_log,
                status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                f"File exceeds maximum size of {max_mb} MB",
                ErrorCodes.FILE_TOO_LARGE,
                [f"File size: {len(file_content) / (1024*1024):.1f} MB"],
            )

        # openpyxl work is synchronous; keep it off the event loop
        report = await asyncio.to_thread(
            generate_alfa_report,
            file_content,
            month,
            year,
            display_name(user),
            template_path,
        )

        request_log.status_code = 200
        request_log.rows_written = report.row_count

        return Response(
            content=report.content,
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{report.file_name}"'},
        )

    except HTTPException:
        raise

    except NoFileProvidedError as e:
        raise _fail(request_log, status.HTTP_400_BAD_REQUEST, str(e), ErrorCodes.INVALID_REQUEST, [])

    except NoMatchingDataError as e:
        raise _fail(
            request_log,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            str(e),
            ErrorCodes.NO_MATCHING_DATA,
            [f"No rows dated {month:02d}/{year}"],
        )

    except (InvalidWorkbookError, MalformedUploadError) as e:
        raise _fail(
            request_log,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Excel file validation failed",
            ErrorCodes.VALIDATION_ERROR,
            [str(e)],
        )

    except TemplateMissingError as e:
        logger.error("Report template missing: %s", e)
        raise _fail(
            request_log,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Server configuration error",
            ErrorCodes.TEMPLATE_MISSING,
            ["Report template is not available"],
        )

    except Exception as e:
        logger.exception("Unexpected error generating alfa report")
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error_detail("Internal server error", ErrorCodes.INTERNAL_ERROR),
        )

    finally:
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        # Always log the request
        try:
            log_request(conn, request_log)
        except sqlite3.Error:
            # Don't fail the request if logging fails
            logger.warning("Could not write request log %s", request_log.request_id)
