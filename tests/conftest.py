"""Keep test runs from writing logs into the real ~/.welllog-viewer."""

import os
import tempfile

os.environ.setdefault("WELLLOG_VIEWER_DIR", tempfile.mkdtemp(prefix="welllog-viewer-tests-"))
os.environ.setdefault("WELLLOG_API_URL", "http://wells.test/api")
