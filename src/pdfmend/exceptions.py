# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Custom exceptions for pdfmend."""


class PDFMendError(Exception):
    """Base exception for all pdfmend errors."""


class ProcessingError(PDFMendError):
    """Error while processing a PDF file."""


class FontLoadError(PDFMendError):
    """Font file could not be loaded or embedded."""


class UnsupportedPDFError(PDFMendError):
    """PDF format is not supported."""
