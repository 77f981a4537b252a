"""Manual upload page for the side-events CSV export."""

IMPORT_PATH = '/events/import'

UPLOAD_PAGE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Upload events</title>
  <style>
    body { background: #000; color: #fff; font-family: sans-serif; }
    main { max-width: 480px; margin: 0 auto; padding: 2rem; }
    h1 { font-size: 1.5rem; margin-bottom: 0.5rem; }
    p.subtitle { color: #888; font-size: 0.9rem; margin-bottom: 1.5rem; }
    form { display: flex; flex-direction: column; gap: 1rem; }
    input { padding: 0.75rem; border: 1px solid #333; border-radius: 8px; background: #111; color: #fff; }
    button { padding: 0.75rem 1.25rem; background: #6366f1; color: #fff; border: none; border-radius: 8px; font-size: 1rem; cursor: pointer; }
    button:disabled { background: #444; cursor: not-allowed; }
    #result { display: none; margin-top: 1rem; padding: 0.75rem; border-radius: 8px; font-size: 0.9rem; }
    #result.ok { display: block; background: rgba(34,197,94,0.15); color: #4ade80; }
    #result.error { display: block; background: rgba(239,68,68,0.15); color: #f87171; }
  </style>
</head>
<body>
  <main>
    <h1>Upload events CSV</h1>
    <p class="subtitle">Use the "Event List" export of the side-events sheet (CSV or TSV).</p>
    <form id="upload-form">
      <input id="file" type="file" accept=".csv,.tsv">
      <button id="submit" type="submit" disabled>Import to database</button>
    </form>
    <div id="result"></div>
  </main>
  <script>
    const fileInput = document.getElementById('file');
    const button = document.getElementById('submit');
    const result = document.getElementById('result');

    fileInput.addEventListener('change', () => {
      button.disabled = !fileInput.files.length;
      result.className = '';
    });

    document.getElementById('upload-form').addEventListener('submit', async (e) => {
      e.preventDefault();
      const file = fileInput.files[0];
      if (!file) return;
      button.disabled = true;
      button.textContent = 'Importing...';
      result.className = '';
      try {
        const res = await fetch('__IMPORT_PATH__', {
          method: 'POST',
          headers: { 'Content-Type': 'text/csv' },
          body: await file.text(),
        });
        const data = await res.json();
        result.className = data.ok ? 'ok' : 'error';
        result.textContent = data.ok
          ? `Imported ${data.imported || 0} events.`
          : (data.error || 'Import failed.');
      } catch (err) {
        result.className = 'error';
        result.textContent = String(err);
      } finally {
        button.disabled = false;
        button.textContent = 'Import to database';
      }
    });
  </script>
</body>
</html>
"""


def render_upload_page(import_path: str = IMPORT_PATH) -> str:
    """Return the upload page HTML posting to `import_path`."""
    return UPLOAD_PAGE_HTML.replace('__IMPORT_PATH__', import_path)
