import logging
from pathlib import PurePath

from flask import Blueprint, Response, current_app, g, jsonify, request, send_file
from pydantic import ValidationError

from ..errors import AggregationNotFound, NoDataError, StorageError, StoredFileNotFound
from ..middlewares.auth import require_user
from ..models.options import ConvertRequest, CsvOptions, TableOptions
from ..pipeline.sinks.csv_sink import table_headers, table_to_csv
from ..pipeline.transforms.flattener import Flattenizer
from ..storage.file_store import FileStore

logger = logging.getLogger(__name__)

bp = Blueprint('files', __name__)


def _user_store() -> FileStore:
    return FileStore.for_user(current_app.config['STORAGE'].data_dir, g.user)


def _invalid(e: ValidationError):
    return jsonify({'status': 'error', 'message': 'Invalid request', 'errors': e.errors(include_url=False, include_context=False)}), 400


@bp.route('/convert', methods=['POST'])
@require_user
def convert():
    """
    Converts a stored query response to CSV next to it.

    Request JSON:
        {
            "filename": "query-....json",
            "aggregationName": "by_status",   // optional
            "filterColumnName": "segment"     // optional
        }
    """
    try:
        payload = ConvertRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return _invalid(e)

    store = _user_store()
    try:
        es_output = store.read_json(payload.filename)
    except StoredFileNotFound:
        return jsonify({'status': 'error', 'message': 'File not found'}), 404
    except StorageError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400
    except ValueError as e:
        return jsonify({'status': 'error', 'message': f'{payload.filename} is not valid JSON: {e}'}), 400

    if not isinstance(es_output, dict):
        return jsonify({'status': 'error', 'message': f'{payload.filename} does not hold a search response object'}), 400

    try:
        table = Flattenizer(payload.aggregation_name, payload.filter_column_name).process(es_output)
    except (AggregationNotFound, NoDataError) as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400

    if not table:
        return jsonify({
            'status': 'error',
            'message': 'No data to convert. Make sure the query includes aggregations.'
        }), 400

    csv = table_to_csv(
        table,
        delimiter=payload.delimiter,
        include_headers=payload.include_headers,
        header_mode=payload.header_mode,
    )
    csv_filename = f'{PurePath(payload.filename).stem}.csv'
    store.save_text(csv_filename, csv)

    return jsonify({
        'success': True,
        'csvFilename': csv_filename,
        'csvFilepath': f'/api/files/{csv_filename}',
        'rows': len(table),
        'columns': table_headers(table, payload.header_mode),
    })


@bp.route('/transform', methods=['POST'])
@require_user
def transform():
    """
    Flattens a raw search response posted in the body without storing anything.

    Query parameters:
        ?aggregationName=...&filterColumnName=...&format=json|csv
    """
    es_output = request.get_json(silent=True)
    if not isinstance(es_output, dict):
        return jsonify({'status': 'error', 'message': 'Request body must be a JSON object'}), 400

    try:
        table_options = TableOptions.model_validate(request.args.to_dict())
        csv_options = CsvOptions.model_validate(request.args.to_dict())
    except ValidationError as e:
        return _invalid(e)

    try:
        table = Flattenizer(table_options.aggregation_name, table_options.filter_column_name).process(es_output)
    except (AggregationNotFound, NoDataError) as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400

    if request.args.get('format', 'json') == 'csv':
        csv = table_to_csv(
            table,
            delimiter=csv_options.delimiter,
            include_headers=csv_options.include_headers,
            header_mode=csv_options.header_mode,
        )
        return Response(csv, mimetype='text/csv')

    return jsonify({'success': True, 'rows': len(table), 'table': table})


@bp.route('/files', methods=['GET'])
@require_user
def list_files():
    return jsonify({'files': _user_store().list_files()})


@bp.route('/files/<string:filename>', methods=['GET'])
@require_user
def download_file(filename):
    try:
        path = _user_store().existing_path(filename)
    except StoredFileNotFound:
        return jsonify({'status': 'error', 'message': 'File not found'}), 404
    except StorageError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400

    mimetype = 'text/csv' if path.suffix.lower() == '.csv' else 'application/json'
    return send_file(path, mimetype=mimetype, as_attachment=True, download_name=filename)


@bp.route('/files/<string:filename>', methods=['DELETE'])
@require_user
def delete_file(filename):
    try:
        _user_store().delete(filename)
    except StoredFileNotFound:
        return jsonify({'status': 'error', 'message': 'File not found'}), 404
    except StorageError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400

    return jsonify({'success': True, 'message': 'File deleted'})
