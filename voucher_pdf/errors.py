# voucher_pdf/errors.py
from __future__ import annotations


class VoucherError(Exception):
    """Base class for every error raised by the voucher engine."""


class EmptyBatchError(VoucherError, ValueError):
    """A batch was started with no records."""


class LayoutError(VoucherError, ValueError):
    """Page/grid configuration is impossible, or a slot is out of range."""


class SurfaceError(VoucherError, RuntimeError):
    """The off-screen rendering surface could not be allocated or was used after release."""


class RasterizationError(VoucherError, RuntimeError):
    """A single voucher could not be turned into an image."""


class AssemblerError(VoucherError, RuntimeError):
    pass


class EmptyDocumentError(AssemblerError):
    """finalize() was called on a document without a single embedded voucher."""
