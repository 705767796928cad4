import logging

from redlight import create_app, socketio

app = create_app()

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    port = app.config.get('PORT', 3000)
    app.logger.info(f"Red Light Green Light server on port {port}")
    app.logger.info(f"   TV view:     http://localhost:{port}/tv.html")
    app.logger.info(f"   Player view: http://localhost:{port}/phone.html")
    # Use SocketIO server to enable websockets in dev
    socketio.run(app, host='0.0.0.0', port=port, debug=True)
