"""Terminal processing errors raised by the document pipeline"""


class DocumentProcessingError(RuntimeError):
    """The renderer could not produce HTML for a document.

    The original exception is chained as __cause__; no partial HTML is returned.
    """
