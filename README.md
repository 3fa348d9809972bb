# boardhub

A small `aiohttp` server for shared boards. A user creates a room over HTTP
and becomes its admin. Anyone who knows the room id can join it over a
WebSocket. A client that joins gets the board's current content and then
every update the admin publishes. Room state lives in Redis. Updates go out
through Redis pub/sub, so several instances can run side by side. On start
the server registers itself with a Consul agent, with an HTTP health check.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running

```
boardhub [--env-file PATH]
```

Settings come from the environment. First a dotenv file is loaded:
`--env-file` if given, otherwise `.env` in the working directory. Variables
already in the environment are not overridden.

| Variable                 | Meaning                                                           |
|--------------------------|-------------------------------------------------------------------|
| `PORT`                   | Port the HTTP server listens on and registers in Consul           |
| `REDIS_ADDR`             | Redis address, `host:port` (default `localhost:6379`)             |
| `LOG_LEVEL`              | `trace`, `debug`, `info`, `warn` or `error` (default `debug`)     |
| `CONSUL_HOST`            | Address of the Consul agent (default `127.0.0.1:8500`)            |
| `CONSUL_SERVICE_NAME`    | Name the service is registered under                              |
| `CONSUL_SERVICE_ADDRESS` | Address Consul uses to reach this service                         |
| `CONSUL_TAGS`            | Comma-separated service tags                                      |

The server starts only after it registers with Consul. If `PORT` is not a
number, or the agent refuses the registration, `boardhub` exits with status 1.
It registers the health check `http://<CONSUL_SERVICE_ADDRESS>:<PORT>/health`
with an interval of 10s, a timeout of 2s and deregistration after 1m.

Log lines are written both to standard output and to `logs/info.log`. The
server stops on SIGINT or SIGTERM. It waits up to 5 seconds for shutdown and
then closes the Redis client.

## HTTP API

- `GET /health` answers `200 OK` with the text `OK`.
- `POST /api/v1/rooms` creates a room and answers `201` with its id as plain
  text. The caller is identified by the `userID` cookie. If there is none, a
  fresh id is issued in that cookie (path `/`, HTTP-only). A user who already
  has a room gets the same room id back. Rooms and the user-to-room link
  expire after 24 hours.
- `GET /api/v1/ws` opens the WebSocket.
- `GET /swagger-ui/doc.json` serves the Swagger 2.0 description of the API.

Cross-origin requests are allowed from any non-empty `Origin`, with
credentials. The allowed methods are GET, POST, PUT, DELETE, PATCH, OPTIONS
and HEAD, and the allowed headers are `Content-Type` and `Authorization`.

Failed requests come back as JSON with the failing status code:

```json
{"timestamp": "...", "status": 500, "error": "Internal Server Error", "message": "...", "path": "/api/v1/rooms"}
```

## WebSocket messages

Clients send JSON objects:

```json
{"type": "join", "roomID": "<room id>"}
{"type": "update", "roomID": "<room id>", "content": ["line one", "line two"]}
```

- `join` adds the connection to the room and subscribes to the room's
  channel. It then sends the room's stored content back as a JSON string
  that holds the encoded list.
- `update` stores new content for the room and publishes it. Every connection
  that has joined the room then receives the list. Only the room's admin,
  matched by the `userID` cookie, may do this. Anyone else gets
  `you're not admin of this room`.

Failures are reported on the same socket as `{"message": "<reason>"}`. These
include an unknown room, an unsupported message type and a refused update.
Messages that are not valid JSON, or do not have the shape above, are logged
and ignored.

When a WebSocket closes, the server closes every connection it is tracking
and drops all room subscriptions.

## Using it as a library

- `boardhub.app.create_app(redis, log)` builds the `aiohttp` application from
  a `redis.asyncio` client and a logger. This is useful for embedding or
  testing. `boardhub.app.main(argv=None)` is the command's entry point.
- `boardhub.room_service.RoomService` and
  `boardhub.connection_service.ConnectionService` hold the room logic. They
  can be used on their own.
- `boardhub.discovery` builds (`registration_from_env`) and sends
  (`register_service`, `init_service_discovery`) the Consul registration.
- `boardhub.logs.get_logger()` returns the shared application logger.
  `get_nop_logger()` returns a logger that discards everything.

## What it does not do

- It serves only the Swagger JSON document. It has no interactive Swagger UI
  pages.
- It has no HTTP endpoint to read, list or delete rooms. Content is seen only
  by joining over the WebSocket, and rooms disappear only when they expire
  in Redis.
- It does not deregister itself from Consul on shutdown. Consul drops the
  service after its health check has been failing for a minute.