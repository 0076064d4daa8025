from flask import Blueprint

api_bp = Blueprint('api', __name__, url_prefix='/api')

# Import route modules to register them
from . import stock_routes  # noqa: E402

from .stock_routes import stock_api_bp  # noqa: E402

api_bp.register_blueprint(stock_api_bp)
