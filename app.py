import logging
from datetime import date

from flask import Flask, Response, jsonify, render_template, request, url_for

import summary_view
from models import db
from spreadsheet import FILENAME_PREFIX, XLSX_MIMETYPE, build_workbook, export_filename
from summary import DataFetchError, fetch_summary

SPREADSHEET_FORMATS = ('spreadsheet', 'excel')


def create_app(overrides=None):
    """
    Build the application. The database pool belongs to the app returned
    here; call close_pool(app) when shutting down.
    """
    app = Flask(__name__)
    app.config.from_object('config')
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
    # keep the published column order in JSON responses
    app.json.sort_keys = False

    db.init_app(app)

    def load_rows():
        start = app.config.get('REPORT_START_DATE')
        start_date = date.fromisoformat(start) if isinstance(start, str) else start
        return fetch_summary(db.session, start_date=start_date)

    @app.route('/', methods=['GET'])
    def index():
        state = summary_view.ViewState.from_args(request.args)
        try:
            rows = load_rows()
        except DataFetchError as e:
            return render_template('index.html', error=str(e)), 500

        page = summary_view.apply(rows, state, app.config.get('PAGE_SIZE', summary_view.PAGE_SIZE))

        def state_url(s):
            return url_for('index', q=s.search or None, sort=s.sort_field, direction=s.direction, page=s.page)

        headers = [
            {
                'field': field,
                'label': label,
                'active': field == state.sort_field,
                'url': state_url(summary_view.toggle_sort(state, field)),
            }
            for field, label in summary_view.TABLE_COLUMNS
        ]
        return render_template(
            'index.html',
            error=None,
            state=state,
            page=page,
            headers=headers,
            records=[r.as_record() for r in page.rows],
            prev_url=state_url(state.with_page(page.number - 1)),
            next_url=state_url(state.with_page(page.number + 1)),
            page_urls={n: state_url(state.with_page(n)) for n in page.window},
            export_url=url_for('employee_summary', export='spreadsheet'),
            export_prefix=FILENAME_PREFIX,
        )

    @app.route('/api/active-employees', methods=['GET'])
    @app.route('/summary', methods=['GET'])
    def employee_summary():
        export_format = request.args.get('export')
        if export_format and export_format not in SPREADSHEET_FORMATS:
            return jsonify({'error': 'Unsupported export format'}), 400

        try:
            rows = load_rows()
        except DataFetchError as e:
            app.logger.error('API error: %s', e)
            return jsonify({'error': 'Failed to fetch employee data'}), 500

        if not export_format:
            return jsonify([r.as_record() for r in rows])

        try:
            content = build_workbook(rows)
        except Exception:
            app.logger.exception('Spreadsheet export failed')
            return jsonify({'error': 'Failed to export employee data'}), 500

        filename = export_filename()
        app.logger.info('Exported %d rows to %s', len(rows), filename)
        return Response(
            content,
            status=200,
            mimetype=XLSX_MIMETYPE,
            headers={'Content-Disposition': f'attachment; filename="{filename}"'},
        )

    return app


def close_pool(app):
    """Release every pooled connection held by the app's engine."""
    with app.app_context():
        db.engine.dispose()
    app.logger.info('Database connection pool closed')


if __name__ == '__main__':
    app = create_app()
    try:
        app.run()
    finally:
        close_pool(app)
