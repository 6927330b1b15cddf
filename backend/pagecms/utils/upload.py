from werkzeug.utils import secure_filename
from flask import current_app
from pagecms.domain.invariants.exceptions import ParseError

ALLOWED_EXTENSIONS = {'json'}

def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS

def read_json_upload(file):
    """
    Returns the decoded text of an uploaded import file.
    Only `.json` files are accepted.
    """
    if not file or not file.filename:
        raise ParseError("No import file provided")

    if not allowed_file(file.filename):
        raise ParseError("Import file must be a .json file")

    filename = secure_filename(file.filename)
    raw = file.read()

    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ParseError(f"Import file {filename} is not UTF-8 text") from exc

    current_app.logger.info(f"Read import file {filename} ({len(raw)} bytes)")
    return text
