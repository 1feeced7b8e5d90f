"""Flask entrypoint for the tape catalog."""

from __future__ import annotations

import logging
from pathlib import Path

from flask import (
    Flask,
    current_app,
    flash,
    jsonify,
    redirect,
    render_template,
    request,
    url_for,
)

from cassettes.catalog import CatalogRepository, FilterProjection
from cassettes.config import get_paths, get_secret_key
from cassettes.db import TapeStore
from cassettes.errors import NotFoundError, StorageError, ValidationError
from cassettes.logging_setup import setup_logging

STALE_SELECTION_MESSAGE = "Cette cassette a été supprimée ; la liste a été actualisée."
REQUIRED_FIELDS_MESSAGE = "Le titre et la cassette sont obligatoires."


def get_catalog() -> CatalogRepository:
    return current_app.extensions["cassettes"]["catalog"]


def get_projection() -> FilterProjection:
    return current_app.extensions["cassettes"]["projection"]


def create_app(db_path: Path | str) -> Flask:
    """Application factory for the tape catalog.

    Opens the database once and keeps the store, repository and projection
    for the lifetime of the app.
    """

    paths = get_paths(db_path)
    setup_logging(paths.logs_dir)

    store = TapeStore(paths.db_path)
    catalog = CatalogRepository(store)
    catalog.reload()
    projection = FilterProjection(catalog)

    base_dir = Path(__file__).resolve().parent

    app = Flask(
        __name__,
        template_folder=str(base_dir / "web" / "templates"),
        static_folder=str(base_dir / "web" / "static"),
        static_url_path="/static",
    )
    app.secret_key = get_secret_key()
    app.extensions["cassettes"] = {
        "store": store,
        "catalog": catalog,
        "projection": projection,
    }

    @app.errorhandler(StorageError)
    def handle_storage_error(exc: StorageError) -> tuple[str, int]:
        """Log database failures and show a non-recoverable error page."""

        logging.exception(
            "Storage failure",
            extra={
                "event": "storage_error",
                "context": {"endpoint": request.endpoint, "error": str(exc)},
            },
        )
        return render_template("error.html", message=str(exc)), 500

    def _stale_selection(tape_id: int) -> str:
        logging.info(
            "Stale tape selection",
            extra={"event": "stale_selection", "context": {"tape_id": tape_id}},
        )
        get_catalog().reload()
        flash(STALE_SELECTION_MESSAGE, "warning")
        return redirect(url_for("library"))

    @app.route("/")
    def library() -> str:
        """Render the tape list, filtered by the ``q`` search term."""

        query = request.args.get("q", "")
        projection = get_projection()
        projection.set_term(query)
        return render_template(
            "library.html",
            tapes=projection.filtered_view(),
            query=query,
            count=get_catalog().count,
        )

    @app.route("/api/tapes")
    def api_tapes() -> object:
        """Return the filtered view as JSON for live search."""

        query = request.args.get("q", "")
        projection = get_projection()
        projection.set_term(query)
        tapes = projection.filtered_view()
        catalog = get_catalog()
        return jsonify(
            {
                "query": query,
                "count": catalog.count,
                "status": catalog.status_summary(),
                "tapes": [tape.to_dict() for tape in tapes],
            }
        )

    @app.route("/tapes/new", methods=["GET", "POST"])
    def new_tape() -> object:
        """Add a new tape to the catalog."""

        if request.method == "POST":
            title = request.form.get("title", "").strip()
            tape = request.form.get("tape", "").strip()
            try:
                get_catalog().add(title, tape)
            except ValidationError:
                return (
                    render_template(
                        "tape_form.html",
                        mode="add",
                        error=REQUIRED_FIELDS_MESSAGE,
                        form=request.form,
                    ),
                    400,
                )
            flash(f"« {title} » ajouté.", "success")
            return redirect(url_for("library"))

        return render_template("tape_form.html", mode="add", form={})

    @app.route("/tapes/<int:tape_id>/edit", methods=["GET", "POST"])
    def edit_tape(tape_id: int) -> object:
        """Edit the title and tape label of an existing tape."""

        selected = get_catalog().current_record(tape_id)
        if selected is None:
            return _stale_selection(tape_id)

        if request.method == "POST":
            title = request.form.get("title", "").strip()
            tape = request.form.get("tape", "").strip()
            try:
                get_catalog().edit(tape_id, title, tape)
            except ValidationError:
                return (
                    render_template(
                        "tape_form.html",
                        mode="edit",
                        tape=selected,
                        error=REQUIRED_FIELDS_MESSAGE,
                        form=request.form,
                    ),
                    400,
                )
            except NotFoundError:
                return _stale_selection(tape_id)
            flash(f"« {title} » enregistré.", "success")
            return redirect(url_for("library"))

        return render_template(
            "tape_form.html",
            mode="edit",
            tape=selected,
            form={"title": selected.title, "tape": selected.tape},
        )

    @app.route("/tapes/<int:tape_id>/delete", methods=["POST"])
    def delete_tape(tape_id: int) -> object:
        """Remove a tape from the catalog."""

        try:
            get_catalog().delete(tape_id)
        except NotFoundError:
            return _stale_selection(tape_id)
        flash("Cassette supprimée.", "success")
        return redirect(url_for("library"))

    return app
