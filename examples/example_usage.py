#!/usr/bin/env python3
"""Parse requests on an asyncio server and track visits in a session."""

import asyncio
import sys
from pathlib import Path

# Add the project root to the Python path if needed
project_root = Path(__file__).parent.parent.absolute()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from requestcore import HttpSession, InMemorySessionStore, RequestParseError, SessionError, configure_logging, read_request

store = InMemorySessionStore()


async def handle(reader, writer):
    try:
        request = await read_request(reader, session_store=store)
        session = request.session()
        if session is None:
            # Expired or unknown id: start a new session
            session = HttpSession()
            store.put(session)
        visits = session.get_attribute("visits", 0) + 1
        session.set_attribute("visits", visits)

        body = f"{request.method.value} {request.path} visits={visits}\n".encode()
        headers = "HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n"
        headers += f"Set-Cookie: SESSIONID={session.id}\r\n"
        writer.write(f"{headers}Content-Length: {len(body)}\r\n\r\n".encode() + body)
    except RequestParseError as e:
        message = str(e).encode()
        writer.write(
            f"HTTP/1.1 {e.status_code} Bad Request\r\nContent-Length: {len(message)}\r\n\r\n".encode()
            + message
        )
    except SessionError:
        writer.write(b"HTTP/1.1 400 Bad Request\r\nContent-Length: 0\r\n\r\n")
    finally:
        await writer.drain()
        writer.close()
        await writer.wait_closed()


async def main():
    server = await asyncio.start_server(handle, "127.0.0.1", 8000)
    async with server:
        await server.serve_forever()


if __name__ == '__main__':
    configure_logging()
    asyncio.run(main())
