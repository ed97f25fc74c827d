import os
from waitress import serve
from wsgi import app  # Import your Flask app

if __name__ == "__main__":
    print("--- Starting es2tabular (Waitress) ---")

    port = int(os.getenv("PORT", "3000"))
    print(f"Kibana: {app.extensions['kibana'].base_url}")
    print(f"Data directory: {app.config['STORAGE'].data_dir.resolve()}")

    # threads=8 handles multiple requests concurrently
    print(f"🚀 Serving on http://0.0.0.0:{port}")
    serve(app, host='0.0.0.0', port=port, threads=8)
