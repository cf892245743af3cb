import fitz  # PyMuPDF


def extract_text_from_pdf(data: bytes) -> str:
    """Extract native text from an in-memory PDF, one labelled block per page."""
    text = []
    with fitz.open(stream=data, filetype="pdf") as doc:
        for i, page in enumerate(doc, 1):
            text.append(f"Page {i}:\n{page.get_text().strip()}\n\n")
    return "".join(text)
