import logging
from datetime import datetime, timezone

from flask import Blueprint, current_app, g, jsonify, request
from pydantic import ValidationError

from ..errors import KibanaError
from ..middlewares.auth import require_user
from ..models.options import QueryRequest
from ..pipeline.sources.kibana import KibanaSource
from ..storage.file_store import FileStore

logger = logging.getLogger(__name__)

bp = Blueprint('query', __name__)


def _hits_total(es_response: dict):
    hits = es_response.get('hits') or {}
    total = hits.get('total') or 0
    # ES 7+ reports {"value": n, "relation": "eq"}
    if isinstance(total, dict):
        return total.get('value', 0)
    return total


@bp.route('/query', methods=['POST'])
@require_user
def execute_query():
    """
    Runs a query through Kibana and stores the raw response for the user.

    Request JSON:
        {
            "index": "logs-*",
            "query": {"size": 0, "aggs": {...}}
        }

    Response:
        {
            "success": true,
            "filename": "query-2024-01-01T00-00-00-000000.json",
            "filepath": "/api/files/query-...json",
            "hasAggregations": true,
            "hits": 0,
            "total": 1234
        }
    """
    try:
        payload = QueryRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return jsonify({'status': 'error', 'message': 'Invalid request', 'errors': e.errors(include_url=False, include_context=False)}), 400

    source = KibanaSource(current_app.extensions['kibana'], payload.index, payload.query)
    try:
        es_response = source.read()
    except KibanaError as e:
        logger.error("Query on %s failed: %s", payload.index, e)
        return jsonify({'status': 'error', 'message': str(e), 'details': e.details}), 502

    timestamp = datetime.now(timezone.utc).strftime('%Y-%m-%dT%H-%M-%S-%f')
    filename = f'query-{timestamp}.json'
    store = FileStore.for_user(current_app.config['STORAGE'].data_dir, g.user)
    store.save_json(filename, es_response)

    aggregations = es_response.get('aggregations')
    return jsonify({
        'success': True,
        'filename': filename,
        'filepath': f'/api/files/{filename}',
        'hasAggregations': isinstance(aggregations, dict) and len(aggregations) > 0,
        'hits': len((es_response.get('hits') or {}).get('hits') or []),
        'total': _hits_total(es_response),
    })


@bp.route('/health', methods=['GET'])
def kibana_health():
    client = current_app.extensions['kibana']
    try:
        health = client.check_health()
    except KibanaError as e:
        return jsonify({'status': 'error', 'kibana': client.base_url, 'message': str(e)}), 502

    return jsonify({'status': 'ok', 'kibana': client.base_url, 'cluster': health})
