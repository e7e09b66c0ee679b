"""Flask HTTP gateway for the shop backend."""

# Wires CORS, JWT auth (flask_jwt_extended), static serving of uploaded images
# and the auth/product/AI routes. Services are built once in create_app() and
# looked up per request from app.extensions.
from flask import Flask, Blueprint, request, jsonify, current_app, send_from_directory
from flask_cors import CORS
from flask_jwt_extended import JWTManager, jwt_required
import logging
from datetime import datetime, timedelta
from pydantic import ValidationError
import redis


# Adds project src/ to Python path so it can import the service modules
import sys
from pathlib import Path
BASE_DIR = Path(__file__).resolve().parent.parent.parent
sys.path.append(str(BASE_DIR / 'src'))

from auth import AuthService, current_identity
from config import Settings, load_settings
from database import Store, get_client
from errors import ApiError, InternalError
from llm import ChatProxy
from products import ProductService
from schemas import (
    SignupRequest, LoginRequest, ProductCreateRequest,
    ProductUploadRequest, ProductUpdateRequest, AskRequest
)
from uploads import UploadService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

api = Blueprint('api', __name__)


def _services() -> dict:
    return current_app.extensions['shop']


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _error(e: ApiError):
    return jsonify({'error': e.message}), e.status_code


def _validation_error(e: ValidationError):
    # Raw input is left out so rejected values (e.g. NaN) never reach the body
    return jsonify({'error': e.errors(include_url=False, include_context=False, include_input=False)}), 400


def _internal_error(context: str, e: Exception):
    logger.error(f"{context}: {e}", exc_info=True)
    return _error(InternalError('Internal server error'))


# ==================== Auth ====================

@api.route('/users/signup', methods=['POST'])
def signup():
    """Register a new user; the response token logs them in."""
    try:
        data = SignupRequest(**_json_body())

        token = _services()['auth'].signup(
            data.email, data.password, data.firstName, data.lastName
        )

        return jsonify({
            'message': 'User created successfully',
            'token': token
        }), 201

    except ValidationError as e:
        return _validation_error(e)
    except ApiError as e:
        return _error(e)
    except Exception as e:
        return _internal_error("Signup error", e)


@api.route('/users/login', methods=['POST'])
def login():
    """Login and get JWT token."""
    try:
        data = LoginRequest(**_json_body())

        token, profile = _services()['auth'].login(data.email, data.password)

        return jsonify({
            'message': 'Login successful',
            'token': token,
            'user': profile
        }), 200

    except ValidationError:
        # Same answer as a wrong password so callers learn nothing about accounts
        return jsonify({'error': 'Invalid credentials'}), 401
    except ApiError as e:
        return _error(e)
    except Exception as e:
        return _internal_error("Login error", e)


# ==================== Products ====================

@api.route('/api/products', methods=['GET'])
def list_products():
    try:
        products = _services()['products'].list_products()
        return jsonify([p.to_json() for p in products])
    except Exception as e:
        return _internal_error("Error fetching products", e)


@api.route('/api/products/<product_id>', methods=['GET'])
def get_product(product_id):
    try:
        return jsonify(_services()['products'].get_product(product_id).to_json())
    except ApiError as e:
        return _error(e)
    except Exception as e:
        return _internal_error("Error fetching product", e)


@api.route('/api/products', methods=['POST'])
def create_product():
    """Create a product from JSON (no upload, no auth)."""
    try:
        data = ProductCreateRequest(**_json_body())

        product = _services()['products'].create_product(
            data.name, data.price,
            image=data.image,
            description=data.description,
            public_id=data.productId
        )
        return jsonify(product.to_json()), 201

    except ValidationError as e:
        return _validation_error(e)
    except ApiError as e:
        return _error(e)
    except Exception as e:
        return _internal_error("Error creating product", e)


@api.route('/api/products/upload', methods=['POST'])
@jwt_required()
def upload_product():
    """Create a product from a multipart form with an image file."""
    try:
        identity = current_identity()
        image = request.files.get('image')
        if image is None or not image.filename:
            return jsonify({'error': 'Image is required'}), 400

        data = ProductUploadRequest(**request.form.to_dict())

        product = _services()['products'].create_product_with_upload(
            data.name, data.price,
            file_bytes=image.read(),
            filename=image.filename,
            description=data.description
        )

        logger.info(f"User {identity['email']} uploaded product {product.id}")
        return jsonify(product.to_json()), 200

    except ValidationError as e:
        return _validation_error(e)
    except ApiError as e:
        return _error(e)
    except Exception as e:
        return _internal_error("Upload error", e)


@api.route('/api/products/<product_id>', methods=['PUT'])
def update_product(product_id):
    try:
        # Unknown ids are 404 whatever the body holds
        _services()['products'].get_product(product_id)
        data = ProductUpdateRequest(**_json_body())
        fields = data.model_dump(exclude_none=True)
        if 'productId' in fields:
            fields['product_id'] = fields.pop('productId')

        product = _services()['products'].update_product(product_id, fields)
        return jsonify(product.to_json())

    except ValidationError as e:
        return _validation_error(e)
    except ApiError as e:
        return _error(e)
    except Exception as e:
        return _internal_error("Error updating product", e)


@api.route('/api/products/<product_id>', methods=['DELETE'])
def delete_product(product_id):
    try:
        _services()['products'].delete_product(product_id)
        return jsonify({'message': 'Product deleted successfully'})
    except ApiError as e:
        return _error(e)
    except Exception as e:
        return _internal_error("Error deleting product", e)


# ==================== AI ====================

@api.route('/api/ai/ask', methods=['POST'])
def ask():
    """Relay a question (and optional history) to the chat model."""
    try:
        data = AskRequest(**_json_body())
        history = [t.model_dump() for t in data.history or []]

        answer = _services()['chat'].ask(data.question, history)
        return jsonify({'answer': answer})

    except ValidationError as e:
        return _validation_error(e)
    except ApiError as e:
        return _error(e)
    except Exception as e:
        return _internal_error("AI request error", e)


# ==================== Misc ====================

@api.route('/uploads/<path:filename>', methods=['GET'])
def uploaded_file(filename):
    """Serve uploaded images read-only."""
    return send_from_directory(_services()['uploads'].upload_dir, filename)


@api.route('/api/health', methods=['GET'])
def health():
    """Health check endpoint."""
    try:
        store_ok = _services()['store'].ping()
    except redis.RedisError as e:
        logger.error(f"Store ping failed: {e}")
        store_ok = False
    chat_ok = _services()['chat'].configured

    return jsonify({
        'status': 'healthy' if store_ok else 'degraded',
        'store': store_ok,
        'ai_configured': chat_ok,
        'timestamp': datetime.now().isoformat()
    })


def _register_jwt_handlers(jwt: JWTManager):
    """Answer token failures with 401 {error: ...}."""

    @jwt.unauthorized_loader
    def missing_token(reason):
        logger.info(f"Rejected request without token: {reason}")
        return jsonify({'error': 'Missing or invalid token'}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        logger.info(f"Rejected invalid token: {reason}")
        return jsonify({'error': 'Invalid token'}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({'error': 'Invalid token'}), 401


def create_app(settings: Settings = None, store: Store = None, chat: ChatProxy = None) -> Flask:
    """
    Build the Flask app.

    Args:
        settings: Configuration (default: load_settings() from the environment)
        store: Document store (default: Redis at settings.redis_url)
        chat: Chat proxy (default: OpenAI client from settings)
    """
    if settings is None:
        settings = load_settings()
    if store is None:
        store = Store(get_client(settings.redis_url))
    if chat is None:
        chat = ChatProxy(settings.openai_api_key, settings.openai_model)

    app = Flask(__name__, static_folder=None)

    # Configures JWT signing + token expiry
    app.config['JWT_SECRET_KEY'] = settings.jwt_secret_key
    app.config['JWT_ACCESS_TOKEN_EXPIRES'] = timedelta(seconds=settings.jwt_access_token_expires)
    app.secret_key = settings.jwt_secret_key

    CORS(
        app,
        origins=list(settings.allowed_origins),
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        supports_credentials=True
    )
    jwt = JWTManager(app)
    _register_jwt_handlers(jwt)

    @app.before_request
    def check_origin():
        # Non-browser clients send no Origin and are always allowed
        origin = request.headers.get('Origin')
        if origin and origin not in settings.allowed_origins:
            logger.info(f"Blocked request from origin {origin}")
            return jsonify({'error': f"CORS policy does not allow access from: {origin}"}), 403

    uploads = UploadService(settings.upload_dir)
    app.extensions['shop'] = {
        'settings': settings,
        'store': store,
        'auth': AuthService(store),
        'uploads': uploads,
        'products': ProductService(store, uploads, default_image=settings.default_image),
        'chat': chat,
    }
    app.register_blueprint(api)

    return app


if __name__ == '__main__':
    settings = load_settings()
    app = create_app(settings)
    logger.info(f"Starting Flask app on {settings.host}:{settings.port}")
    app.run(host=settings.host, port=settings.port, debug=settings.debug)
