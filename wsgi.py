import os

from maie_bridge import create_app
from maie_bridge.extensions import socketio

app = create_app()

if __name__ == '__main__':
    socketio.run(app, host=os.getenv('HOST', '0.0.0.0'), port=int(os.getenv('PORT', '3000')))
