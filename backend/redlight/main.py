import base64
import io

import qrcode
from flask import Blueprint, current_app, jsonify, request

main = Blueprint('main', __name__)


def build_join_url() -> str:
    """URL of the phone join page as seen by the client making the request."""
    phone_path = current_app.config.get('PHONE_PATH', '/phone.html')
    base = current_app.config.get('PUBLIC_BASE_URL')
    if not base:
        proto = request.headers.get('X-Forwarded-Proto') or request.scheme
        host = request.headers.get('X-Forwarded-Host') or request.host
        base = f"{proto}://{host}"
    return f"{base.rstrip('/')}/{phone_path.lstrip('/')}"


def build_qr_data_url(data: str) -> str:
    qr = qrcode.QRCode(border=2, box_size=10)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color='#1a1a2e', back_color='white')
    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    encoded = base64.b64encode(buffer.getvalue()).decode('ascii')
    return f"data:image/png;base64,{encoded}"


@main.route('/')
def index():
    return jsonify({'message': 'Red Light, Green Light game server'})


@main.route('/health')
def health():
    return jsonify({'status': 'ok'})


@main.route('/qr')
def join_qr():
    url = build_join_url()
    try:
        qr = build_qr_data_url(url)
    except Exception:
        current_app.logger.exception(f"[qr-error] url={url}")
        return jsonify({'error': 'QR generation failed'}), 500
    return jsonify({'qr': qr, 'url': url})
