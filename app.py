# app.py
import argparse
import copy
import json
import os
import sys

# Flask is only needed for API mode
try:
    from flask import Flask, request, jsonify
except ImportError:
    Flask = None # Will prevent API mode if Flask not installed

from site_qa import AuditConfig, run_audit, write_report
from site_qa.config import CANONICAL_ORIGIN
from site_qa.report.export import export_json, export_csv_dir

DEFAULT_CONFIG = {
    "SiteAudit": {
        "base_url": CANONICAL_ORIGIN,
        "canonical_origin": CANONICAL_ORIGIN,
        "site_name": "creativeai-tools",
        "locales": ["fr", "en"],
        "secondary_locale": "en",
        "header_paths": ["/", "/en/"],
        "header_client": "requests",
        "assets_root": ".",
        "size_thresholds": {"css": 120 * 1024, "js": 80 * 1024},
        "report_path": "reports/qa_report.md",
        "link_table_limit": 500,
        "parallel_sweeps": False,
        "workers": 6
    },
    "Global": {"request_timeout": 15, "http_retries": 2, "retry_backoff": 0.25, "debug": False}
}

# --- Flask App Setup (if Flask is available) ---
if Flask:
    app = Flask(__name__)
    # Config used by the API; replaced by run_cli when --config is given
    flask_app_config = copy.deepcopy(DEFAULT_CONFIG)
else:
    app = None


def merge_config(base: dict, overrides: dict) -> dict:
    """Shallow per-section merge, same as the config file handling."""
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key].update(value)
        else:
            merged[key] = value
    return merged


def load_config(path: str | None) -> dict:
    current_config = copy.deepcopy(DEFAULT_CONFIG)
    if not path:
        return current_config
    try:
        with open(path, 'r') as f:
            current_config = merge_config(current_config, json.load(f))
        print(f"Loaded custom configuration from {path}")
    except FileNotFoundError: print(f"Warning: Config file {path} not found. Using default settings.")
    except json.JSONDecodeError: print(f"Warning: Error decoding JSON from {path}. Using default settings.")
    return current_config


# --- Flask Route (if Flask is available) ---
if app:
    @app.route('/check', methods=['POST', 'GET'])
    def check_endpoint():
        if request.method == 'GET':
            data = request.args
        else: # POST
            data = request.get_json(silent=True)
            if data is None or not isinstance(data, dict):
                return jsonify({"error": "Invalid JSON payload"}), 400

        try:
            config = AuditConfig.from_dict(flask_app_config, base_url=data.get('base_url'))
        except ValueError as ve:
            return jsonify({"error": str(ve)}), 400

        try:
            audit = run_audit(config, verbose=False)
            return jsonify({"findings": audit["result"].to_dict(), "markdown": audit["markdown"]})
        except Exception as e:
            return jsonify({"error": f"An unexpected error occurred: {str(e)}"}), 500


def run_cli(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Pre-deployment QA checker (links, SEO tags, sitemaps, robots.txt, security headers, static sizes)")
    parser.add_argument("--base-url", type=str, default=None, help="Site to check (default: $BASE_URL or the canonical origin).")
    parser.add_argument("--config", type=str, default=None, help="Path to a JSON config file.")
    parser.add_argument("--output", type=str, default=None, help="Report path (overrides config).")
    parser.add_argument("--assets-root", type=str, default=None, help="Directory holding assets/styles.css and assets/main.js.")
    parser.add_argument("--header-client", choices=["requests", "curl"], default=None, help="How raw response headers are fetched.")
    parser.add_argument("--parallel", action="store_true", help="Run the sweeps concurrently (report order is unchanged).")
    parser.add_argument("--export-json", type=str, default=None, help="Also write the structured findings to this JSON file.")
    parser.add_argument("--export-csv", type=str, default=None, help="Directory to export CSVs (links.csv, issues.csv).")
    parser.add_argument("--debug", action="store_true", help="Print per-request diagnostics.")
    parser.add_argument("--serve", action="store_true", help="Run the API server instead of a one-off check.")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="API server host.")
    parser.add_argument("--port", type=int, default=5000, help="API server port.")
    args = parser.parse_args(argv)

    global flask_app_config
    current_config = load_config(args.config)

    audit_cfg = current_config.setdefault("SiteAudit", {})
    if args.output:
        audit_cfg["report_path"] = args.output
    if args.assets_root:
        audit_cfg["assets_root"] = args.assets_root
    if args.header_client:
        audit_cfg["header_client"] = args.header_client
    if args.parallel:
        audit_cfg["parallel_sweeps"] = True
    if args.debug:
        current_config.setdefault("Global", {})["debug"] = True

    if args.serve:
        if not Flask:
            print("Error: Flask is not installed. Cannot run in API/server mode.")
            print("Please install Flask ('pip install flask') to run as a server.")
            return 1
        flask_app_config = current_config
        print(f"Starting Flask server on http://{args.host}:{args.port}/ (API mode)")
        app.run(host=args.host, port=args.port, debug=False)
        return 0

    base_url = args.base_url or os.environ.get("BASE_URL") or None
    try:
        config = AuditConfig.from_dict(current_config, base_url=base_url)
    except ValueError as ve:
        print(f"Error: {ve}")
        return 2

    try:
        audit = run_audit(config)
        result = audit["result"]
        report_path = write_report(audit["markdown"], config.report_path)
        if args.export_json:
            export_json(args.export_json, result.to_dict())
            print(f"Findings saved to {args.export_json}")
        if args.export_csv:
            paths = export_csv_dir(args.export_csv, result)
            print(f"CSV exports saved to {', '.join(paths.values())}")
    except Exception as e:
        print(f"💥 QA script failed: {e}")
        return 1

    print(f"\n📄 Report written to: {report_path}")
    return 0


if __name__ == "__main__":
    sys.exit(run_cli())
