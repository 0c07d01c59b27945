import os

from lyricsflip import create_app, socketio

app = create_app()

if __name__ == '__main__':
    port = int(os.environ.get('LYRICSFLIP_PORT', 5000))
    socketio.run(app, host=os.environ.get('LYRICSFLIP_HOST', '127.0.0.1'), port=port, debug=True)
