from pathlib import Path
from urllib.parse import quote

from flask import (
    Flask,
    request,
    render_template_string,
    send_file,
    redirect,
    url_for,
    jsonify,
)
from werkzeug.exceptions import InternalServerError, RequestEntityTooLarge, RequestTimeout

from .deadline import UploadDeadline
from .filenames import clean_upload_name
from .storage import ShareStorage

DEFAULT_MAX_UPLOAD_BYTES = 100 * 1024 * 1024  # 100 MiB
DEFAULT_UPLOAD_TIMEOUT = 30.0

HTML_TEMPLATE = '''
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>File Share</title>
    <style>
        * { box-sizing: border-box; margin: 0; padding: 0; }
        body { font-family: Arial, sans-serif; padding: 20px; max-width: 100%; overflow-x: hidden; }
        .container { max-width: 1000px; margin: 0 auto; padding: 0 15px; }
        h1, h2 { margin-bottom: 20px; }
        .upload-form { margin-bottom: 30px; }
        .file-list { width: 100%; border: 1px solid #ddd; border-radius: 4px; overflow: hidden; }
        .file-item {
            display: flex;
            justify-content: space-between;
            align-items: center;
            padding: 12px 15px;
            border-bottom: 1px solid #eee;
        }
        .file-item:last-child { border-bottom: none; }
        .file-name { flex: 1; word-break: break-word; white-space: normal; overflow: hidden; padding-right: 15px; }
        .file-meta { color: #888; font-size: 13px; white-space: nowrap; padding-right: 15px; }
        .file-actions { flex-shrink: 0; display: flex; gap: 10px; }
        .download-btn, .delete-btn {
            display: inline-block;
            padding: 5px 12px;
            text-decoration: none;
            border-radius: 3px;
            font-size: 14px;
            white-space: nowrap;
            color: white;
        }
        .download-btn { background-color: #4CAF50; }
        .delete-btn { background-color: #f44336; }
        .empty { padding: 15px; }
        #uploadStatus { margin: 10px 0; color: #666; }
        @media (max-width: 600px) {
            .file-item { flex-direction: column; align-items: flex-start; }
            .file-actions { margin-top: 8px; width: 100%; justify-content: flex-end; }
        }
    </style>
</head>
<body>
<div class="container">
    <h1>File Share</h1>
    <form action="{{ url_for('upload_file') }}" method="post" enctype="multipart/form-data" class="upload-form">
        <input type="file" name="file" id="fileInput">
        <button type="submit">Upload</button>
    </form>
    <div id="uploadStatus"></div>

    <h2>Files</h2>
    <div class="file-list">
        {% for f in files %}
        <div class="file-item">
            <div class="file-name">{{ f.name }}</div>
            <div class="file-meta">{{ f.size_human }} &middot; {{ f.modified_human }}</div>
            <div class="file-actions">
                <a href="{{ url_for('download_file', filename=f.name) }}" class="download-btn">Download</a>
                <a href="{{ url_for('delete_file', filename=f.name) }}" class="delete-btn">Delete</a>
            </div>
        </div>
        {% else %}
        <p class="empty">No files shared yet.</p>
        {% endfor %}
    </div>
</div>

<script>
    document.getElementById('fileInput').addEventListener('change', function () {
        const statusDiv = document.getElementById('uploadStatus');
        if (this.files.length > 0) {
            statusDiv.textContent = 'Selected: ' + this.files[0].name;
        }
    });
</script>
</body>
</html>
'''

# ----------------------------
# JSON for CLI clients, redirect for the browser form
# ----------------------------

def wants_json_response() -> bool:
    """
    Only explicit requests get JSON:
    - ?json=1 forces JSON.
    - Accept: application/json forces JSON.
    """
    if request.args.get("json") in ("1", "true", "yes"):
        return True
    return "application/json" in request.headers.get("Accept", "")

def content_disposition(filename: str) -> str:
    quoted = quote(filename, safe="")
    return f"attachment; filename=\"{quoted}\"; filename*=UTF-8''{quoted}"

# ----------------------------
# Flask app
# ----------------------------

def create_app(
    upload_dir: Path,
    public_dir: Path | str = "public",
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
    upload_timeout: float = DEFAULT_UPLOAD_TIMEOUT,
) -> Flask:
    app = Flask(
        __name__,
        static_folder=str(Path(public_dir).resolve()),
        static_url_path="",
    )
    app.config["UPLOAD_FOLDER"] = str(upload_dir)
    app.config["MAX_CONTENT_LENGTH"] = max_upload_bytes
    app.config["UPLOAD_TIMEOUT"] = upload_timeout

    storage = ShareStorage(Path(app.config["UPLOAD_FOLDER"]))
    storage.ensure()

    app.wsgi_app = UploadDeadline(app.wsgi_app, upload_timeout, path="/upload")

    @app.errorhandler(RequestEntityTooLarge)
    def upload_too_large(err):
        app.logger.warning("[upload] rejected, body exceeds %d bytes", max_upload_bytes)
        return "File too large", 413

    @app.errorhandler(RequestTimeout)
    def upload_timed_out(err):
        app.logger.warning("[upload] timed out after %.0fs", upload_timeout)
        return "Upload timed out", 408

    @app.errorhandler(InternalServerError)
    def server_error(err):
        app.logger.error("[server] unhandled error: %s", err.original_exception)
        return "Server error", 500

    @app.route("/")
    def index():
        try:
            files = storage.list_files()
            return render_template_string(HTML_TEMPLATE, files=files)
        except OSError:
            app.logger.exception("[page] failed to read %s", storage.root)
            return "Server error", 500

    @app.route("/upload", methods=["POST"])
    def upload_file():
        if sum(len(v) for _, v in request.files.lists()) > 1:
            return "Only one file per upload", 400

        f = request.files.get("file")
        if f is None or not f.filename:
            return "No file selected", 400

        raw_name = f.filename
        name = clean_upload_name(raw_name)
        try:
            dest = storage.save(name, f.stream)
        except (OSError, ValueError):
            app.logger.exception("[upload] failed to store %r", name)
            return "Upload failed", 500

        size_bytes = dest.stat().st_size
        app.logger.info("[upload] stored %s (%d bytes)", dest.name, size_bytes)
        if wants_json_response():
            payload = {
                "ok": True,
                "original_filename": raw_name,
                "saved_as": dest.name,
                "size_bytes": size_bytes,
                "download_url": url_for("download_file", filename=dest.name, _external=True),
            }
            return jsonify(payload), 201
        return redirect(url_for("index"))

    @app.route("/download/<filename>")
    def download_file(filename):
        path = storage.resolve(filename)
        if path is None or not path.is_file():
            return "File not found", 404

        try:
            response = send_file(
                path,
                mimetype="application/octet-stream",
                as_attachment=True,
            )
        except FileNotFoundError:
            return "File not found", 404
        except OSError:
            app.logger.exception("[download] failed to open %r", filename)
            return "Download failed", 500

        response.headers["Content-Disposition"] = content_disposition(filename)
        return response

    @app.route("/delete/<filename>")
    def delete_file(filename):
        try:
            storage.delete(filename)
        except OSError:
            app.logger.warning("[delete] could not remove %r", filename, exc_info=True)
            return "File not found", 404

        app.logger.info("[delete] removed %s", filename)
        return redirect(url_for("index"))

    return app
