#!/usr/bin/env python3
"""
Flask web application for the Store-Aware Recipe Builder.

Provides JSON endpoints for uploading a store catalog, searching and choosing
ingredients from it, building templated recipes with a pairing suggestion,
and generating a recipe for one product with the LLM.
"""

import os
import sys
import logging
import uuid
from logging.handlers import RotatingFileHandler
from datetime import datetime
from flask import Flask, request, jsonify, session
from flask_cors import CORS
from dotenv import load_dotenv
from pydantic import ValidationError
from werkzeug.exceptions import RequestEntityTooLarge

# Load environment variables from .env file
load_dotenv()

# Add parent directory to path
project_root = os.path.join(os.path.dirname(__file__), '..', '..')
sys.path.insert(0, project_root)
sys.path.insert(0, os.path.join(project_root, 'src'))

from builder_state import BuilderState
from catalog_ingest import ingest_upload
from llm_provider import null_llm_requested
from recipe_builder import DIETARY_OPTIONS, DISH_TYPES
from recipe_generator import GenerateRecipeRequest, GenerationError, RecipeGenerator
from session_store import BuilderSessionStore

# Setup logging with both console and file output
logs_dir = os.environ.get("LOG_DIR", os.path.join(project_root, 'logs'))
os.makedirs(logs_dir, exist_ok=True)

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(),  # Console output
        RotatingFileHandler(
            os.path.join(logs_dir, 'app.log'),
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5
        )
    ]
)
logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)
app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key-change-in-production")
app.config['MAX_CONTENT_LENGTH'] = int(os.environ.get("MAX_UPLOAD_MB", "10")) * 1024 * 1024
CORS(app)

sessions = BuilderSessionStore(
    ttl_seconds=int(os.environ.get("SESSION_TTL_SECONDS", "1800"))
)

recipe_generator = RecipeGenerator.from_env()
if null_llm_requested():
    logger.warning("USE_NULL_LLM=true - /api/recipe will return placeholder text")
elif not os.environ.get("ANTHROPIC_API_KEY"):
    logger.warning("ANTHROPIC_API_KEY not set - /api/recipe will answer 500")

MISSING_FIELDS_ERROR = (
    "Missing required fields. Please send JSON with { product, dishType, dietary }."
)


def _builder_id() -> str:
    """Session key of the caller's builder state, created on first use."""
    builder_id = session.get('builder_id')
    if not builder_id:
        builder_id = uuid.uuid4().hex
        session['builder_id'] = builder_id
    return builder_id


def _catalog_view(state: BuilderState) -> dict:
    return {
        "total": len(state.catalog),
        "available": len(state.available_products),
        "matching": len(state.filtered_products),
        "search": state.search,
        "visible_count": state.visible_count,
        "hidden_count": state.hidden_count,
        "products": [
            {**p.to_dict(), "chosen": state.is_chosen(p.name)}
            for p in state.visible_products
        ],
    }


def _selection_view(state: BuilderState) -> dict:
    return {
        "chosen": list(state.chosen),
        "dietary": state.dietary,
        "dishType": state.dish_type,
        "can_build": state.can_build,
    }


@app.errorhandler(RequestEntityTooLarge)
def handle_too_large(e):
    return jsonify({"success": False, "error": "Uploaded file is too large"}), 413


@app.route('/health')
def health_check():
    """Health check endpoint."""
    return jsonify({"status": "healthy", "timestamp": datetime.now().isoformat()}), 200


# ----------------------------------------------------------------------------
# AI generation
# ----------------------------------------------------------------------------

@app.route('/api/recipe', methods=['GET'])
def api_recipe_status():
    """Basic health check for the generation endpoint."""
    return jsonify({"ok": True, "message": "Recipe API is live."})


@app.route('/api/recipe', methods=['POST'])
def api_generate_recipe():
    """Generate a recipe for one product with the LLM."""
    data = request.get_json(silent=True) or {}
    try:
        body = GenerateRecipeRequest.model_validate(data)
    except ValidationError as e:
        logger.info(f"Rejected recipe request: {e.error_count()} validation errors")
        return jsonify({"success": False, "error": MISSING_FIELDS_ERROR}), 400

    try:
        recipe = recipe_generator.generate(body)
        return jsonify({"success": True, "recipe": recipe}), 200

    except GenerationError as e:
        return jsonify({"success": False, "error": e.message, "code": e.code}), e.status


# ----------------------------------------------------------------------------
# Catalog
# ----------------------------------------------------------------------------

@app.route('/api/catalog', methods=['POST'])
def api_upload_catalog():
    """
    Replace the catalog with an uploaded CSV or Excel file.

    Form field ``file``; when several files are sent only the first is used.
    """
    # Oversized bodies raise RequestEntityTooLarge here, handled above
    files = request.files.getlist('file')
    upload = files[0] if files else None
    if upload is None or not upload.filename:
        return jsonify({"success": False, "error": "No file uploaded"}), 400

    try:
        products = ingest_upload(upload.filename, upload.read())
        _, state = sessions.update(_builder_id(), lambda s: s.with_catalog(products))
        logger.info(f"Catalog replaced from {upload.filename}: {len(products)} products")

        return jsonify({
            "success": True,
            "filename": upload.filename,
            "catalog": _catalog_view(state),
        })

    except Exception as e:
        logger.error(f"Error uploading catalog: {e}", exc_info=True)
        return jsonify({"success": False, "error": str(e)}), 500


@app.route('/api/catalog', methods=['GET'])
def api_get_catalog():
    """Current product list view (read-only)."""
    try:
        state = sessions.get(_builder_id())
        return jsonify({"success": True, "catalog": _catalog_view(state)})

    except Exception as e:
        logger.error(f"Error getting catalog: {e}", exc_info=True)
        return jsonify({"success": False, "error": str(e)}), 500


@app.route('/api/catalog/search', methods=['POST'])
def api_search_catalog():
    """
    Set the product search term and return the filtered view.

    JSON body:
        search: Case-insensitive text matched against product names only
    """
    try:
        data = request.get_json(silent=True) or {}
        term = data.get('search') or ''
        if not isinstance(term, str):
            return jsonify({"success": False, "error": "search must be a string"}), 400

        _, state = sessions.update(_builder_id(), lambda s: s.with_search(term))
        return jsonify({"success": True, "catalog": _catalog_view(state)})

    except Exception as e:
        logger.error(f"Error searching catalog: {e}", exc_info=True)
        return jsonify({"success": False, "error": str(e)}), 500


@app.route('/api/catalog/more', methods=['POST'])
def api_show_more():
    """Reveal the next page of products."""
    try:
        _, state = sessions.update(_builder_id(), lambda s: s.show_more())
        return jsonify({"success": True, "catalog": _catalog_view(state)})

    except Exception as e:
        logger.error(f"Error paging catalog: {e}", exc_info=True)
        return jsonify({"success": False, "error": str(e)}), 500


# ----------------------------------------------------------------------------
# Selection
# ----------------------------------------------------------------------------

@app.route('/api/chosen', methods=['POST'])
def api_toggle_chosen():
    """Choose an ingredient, or un-choose it if already chosen."""
    try:
        data = request.get_json(silent=True) or {}
        name = data.get('name')
        if not isinstance(name, str) or not name:
            return jsonify({"success": False, "error": "Missing ingredient name"}), 400

        _, state = sessions.update(_builder_id(), lambda s: s.toggle(name))
        return jsonify({"success": True, "selection": _selection_view(state)})

    except Exception as e:
        logger.error(f"Error toggling ingredient: {e}", exc_info=True)
        return jsonify({"success": False, "error": str(e)}), 500


@app.route('/api/options', methods=['GET'])
def api_get_options():
    """Dietary and dish type choices, plus the current selection."""
    try:
        state = sessions.get(_builder_id())
        return jsonify({
            "success": True,
            "dietary_options": DIETARY_OPTIONS,
            "dish_types": DISH_TYPES,
            "selection": _selection_view(state),
        })

    except Exception as e:
        logger.error(f"Error getting options: {e}", exc_info=True)
        return jsonify({"success": False, "error": str(e)}), 500


@app.route('/api/options', methods=['POST'])
def api_set_options():
    """Set the dietary preference and/or dish type."""
    try:
        data = request.get_json(silent=True) or {}
        dietary = data.get('dietary')
        dish_type = data.get('dishType')

        if dietary is not None and dietary not in DIETARY_OPTIONS:
            return jsonify({"success": False, "error": f"Unknown dietary option: {dietary}"}), 400
        if dish_type is not None and dish_type not in DISH_TYPES:
            return jsonify({"success": False, "error": f"Unknown dish type: {dish_type}"}), 400

        def apply(s: BuilderState) -> BuilderState:
            if dietary is not None:
                s = s.with_dietary(dietary)
            if dish_type is not None:
                s = s.with_dish_type(dish_type)
            return s

        _, state = sessions.update(_builder_id(), apply)
        return jsonify({"success": True, "selection": _selection_view(state)})

    except Exception as e:
        logger.error(f"Error setting options: {e}", exc_info=True)
        return jsonify({"success": False, "error": str(e)}), 500


# ----------------------------------------------------------------------------
# Recipes
# ----------------------------------------------------------------------------

@app.route('/api/recipes', methods=['POST'])
def api_build_recipe():
    """Build a templated recipe from the chosen ingredients."""
    try:
        before, after = sessions.update(_builder_id(), lambda s: s.build())

        if after is before:
            return jsonify({
                "success": False,
                "built": False,
                "error": "Choose at least one ingredient from a non-empty catalog first",
                "selection": _selection_view(after),
            }), 409

        return jsonify({
            "success": True,
            "built": True,
            "recipe": after.latest_recipe.to_dict(),
            "count": len(after.recipes),
        })

    except Exception as e:
        logger.error(f"Error building recipe: {e}", exc_info=True)
        return jsonify({"success": False, "error": str(e)}), 500


@app.route('/api/recipes', methods=['GET'])
def api_get_recipes():
    """Recipe history, most recent first."""
    try:
        state = sessions.get(_builder_id())
        return jsonify({
            "success": True,
            "recipes": [r.to_dict() for r in state.recipes],
        })

    except Exception as e:
        logger.error(f"Error getting recipes: {e}", exc_info=True)
        return jsonify({"success": False, "error": str(e)}), 500


@app.route('/api/reset', methods=['POST'])
def api_reset():
    """Forget the catalog, selection and recipe history."""
    try:
        sessions.reset(_builder_id())
        return jsonify({"success": True})

    except Exception as e:
        logger.error(f"Error resetting builder: {e}", exc_info=True)
        return jsonify({"success": False, "error": str(e)}), 500


if __name__ == '__main__':
    # Run development server
    app.run(
        host='0.0.0.0',
        port=int(os.environ.get("PORT", "5000")),
        debug=os.environ.get("FLASK_DEBUG", "false").lower() == "true",
    )
