# kate

Building blocks for HTTP services and the code around them. These include
handler chains, middlewares, request-scoped context, rate sampling, a rotating
log file, a line log formatter, date values and model metadata with a SQL
WHERE-clause builder.

## Handlers and middlewares

A handler is any callable `handler(ctx, w, r)`. A middleware turns one handler
into another.

- `kate.middleware`: `Middleware` (abstract, with `proxy(handler)`),
  `MiddlewareFunc(func)` and `Chain`. `Chain(a, b).then(handler)` runs `a`
  outermost, then `b`, then the handler. `Chain.then_func` wraps a plain
  function, and `Chain.append(...)` returns a new, longer chain.
- `kate.methods`: `method_only(method, handler)` and the shortcuts `get`,
  `post`, `put`, `delete`, `patch`, `head` and `options`. A request with any
  other method gets `405 Method Not Allowed`.
- `kate.middlewares`:
  - `recovery(handler)` and the ready middleware `RECOVERY` turn an exception
    into a `500` response and log it.
  - `logging_middleware(logger)` logs `request in` and `request finished` with
    the status code, the body and the duration.
  - `cached(size, ttl)` returns a `CachedProxy`. It caches `200` responses for
    `ttl` seconds (or a `timedelta`), keyed by `method|uri|body`, and keeps at
    most `size` entries. A request whose `nocache` form value is set bypasses
    the cache.

The middlewares expect a writer with `headers` (name to list of values),
`status_code`, `raw_body`, `write_header(status)` and `write(data)`. They expect
a request with `method`, `request_uri`, `raw_body`, `remote_addr` and `form`.

```python
from kate.middleware import Chain
from kate.middlewares import RECOVERY, cached
from kate.methods import get

def hello(ctx, w, r):
    w.write(b"hello")

handler = Chain(RECOVERY, cached(1024, 60.0)).then(get(hello))
```

## Context, debug flag and sampling

- `kate.log.context`: `Context` is an immutable key/value chain with
  `with_value` and `value`. `background()` returns an empty root.
  `to_context(ctx, logger)` and `get_logger(ctx)` carry a `logging` logger,
  and `get_logger` falls back to a logger that discards everything.
  `with_fields(ctx, **fields)` adds fields to every record of that logger.
- `kate.debug`: `wrap(ctx, enabled)` and `get(ctx)` set and read a debug flag.
  The flag is `False` when it was never set.
- `kate.sampler`: `Sampler(tick, first, thereafter)`. Within each `tick`,
  `check(now)` accepts the first `first` events and after that every
  `thereafter`-th one.

```python
import time
from kate.sampler import Sampler

sampler = Sampler(1.0, 0, 10)
keep = sampler.check(time.time())
```

## Application and logging

- `kate.app`: `get_name()`, `get_home_dir()` (the parent of the program's
  directory) and `get_default_config_file()` (`<home>/conf/<name>.ini`).
  `update_pid_file(path)`, `get_pid_file()` and `remove_pid_file()` manage a
  pid file. `print_version()` and `log_version(logger)` report the
  `VERSION_*`, `REVISION`, `LAST_AUTHOR`, `LAST_DATE` and `BUILD_DATE` values.
- `kate.log.writer`: `Writer(location)` is an append-only log file with
  `write`, `sync`, `close` and context-manager support. When the day changes,
  the file is renamed with yesterday's date as suffix (`.YYYYMMDD`) and
  reopened. The file from `MAX_ROTATE_COUNT + 1` days ago is removed. `rotate()`
  can also be called directly.
- `kate.log.encoder`: `SimpleFormatter` is a `logging.Formatter` that writes
  one tab-separated line per record: level, time, pid, thread, message, the
  extra fields as a JSON object, and the caller. `quote_string` and
  `encode_value` are its JSON helpers.

```python
import logging
from kate.log.encoder import SimpleFormatter

handler = logging.StreamHandler()
handler.setFormatter(SimpleFormatter())
logger = logging.getLogger("service")
logger.addHandler(handler)
logger.warning("started", extra={"port": 8080})
```

## Dates

`kate.datetimes` has two value types:

- `DateTime`, truncated to the second, with the text form `YYYY-MM-DD HH:MM:SS`.
- `Date`, with the text form `YYYY-MM-DD`.

Both offer `parse`, `scan` (from a database value), `to_json`, `from_json`
(where `null` gives `None`) and `sub`. `Date` also has `next_day`, `prev_day`,
`next_month`, `prev_month`, `next_year` and `prev_year`. Month and year steps
overflow the way day arithmetic does:

```python
from datetime import date
from kate.datetimes import Date, DateTime

str(Date(date(2024, 1, 31)).next_month(1))          # "2024-03-02"
DateTime.parse("2024-01-02 03:04:05").to_json()     # '"2024-01-02 03:04:05"'
```

## Models and conditions

- Models are dataclasses. Each field's `orm` metadata holds its tag, such as
  `"pk;column(id)"`, `"auto"`, `"json"`, `"json(omitempty)"` or `"-"`. A model
  may define `table_name()` and, if it is sharded, `table_suffix()`.
- `kate.orm.models_utils`: `snake_string`, `get_full_name`, `get_table_name`,
  `is_sharded`, `get_table_suffix`, `get_column_name` and `parse_struct_tag`.
- `kate.orm.fields`: `FieldInfo`, `Fields` and `new_field_info`.
- `kate.orm.model_info`: `ModelInfo(model)` maps a model to its table and
  columns. It also builds ORDER BY and GROUP BY terms. `quote` and `quote_all`
  add backticks.
- `kate.orm.json_value`: `JSONValue` writes a field as JSON text and reads it
  back into dataclasses.
- `kate.orm.model_cache`: `add_database`, `get_database`, `register_model`,
  `register_model_with_prefix`, `register_model_with_suffix`, `get_model_info`,
  `boot_strap` and `reset_model_cache`.
- `kate.orm.params`: `ColOp` and `col_value(op, value)` for updates such as
  `age = age - 1`.
- `kate.orm.condition`: `Condition` is immutable. It has `and_`, `and_not`,
  `or_`, `or_not`, `and_cond`, `or_cond`, `and_not_cond`, `or_not_cond`,
  `is_empty` and `get_where_sql(mi, cond)`. Expressions take the form
  `field__operator`, with the operators `exact`, `eq`, `ne`, `lt`, `lte`,
  `gt`, `gte`, `in`, `between`, `iexact`, `contains`, `icontains`,
  `startswith`, `istartswith`, `endswith`, `iendswith` and `isnull`.

`get_where_sql` takes a SQL condition builder that you supply. The builder
returns a SQL fragment for each operator and collects the arguments:

```python
from dataclasses import dataclass, field
from kate.orm.condition import Condition
from kate.orm.model_info import ModelInfo

@dataclass
class Person:
    id: int = field(default=0, metadata={"orm": "pk;column(id)"})
    name: str = field(default="", metadata={"orm": "column(name)"})

class Builder:
    def __init__(self):
        self.args = []

    def eq(self, column, value):
        self.args.append(value)
        return f"{column} = ?"

    def like_binary(self, column, value):
        self.args.append(value)
        return f"{column} LIKE BINARY ?"

builder = Builder()
cond = Condition().and_("id", 1).or_cond(Condition().and_("name__startswith", "zh"))
cond.get_where_sql(ModelInfo(Person), builder)
# "`id` = ? OR (`name` LIKE BINARY ?)", builder.args == [1, "zh%"]
```

## What the package does not do

- It runs no HTTP server. You adapt the handlers and middlewares to your own
  server's request and writer objects.
- It executes no SQL. The ORM modules describe models, register them and
  render WHERE, ORDER BY and GROUP BY parts. There is no insert, read, update,
  delete, query or transaction call against a database, and no SQL statement
  builder.
- It has no JSON result or error-response helpers for handlers.
- It does not connect the log writer to `logging` handlers. `Writer` and
  `SimpleFormatter` are separate pieces.

## Running the tests

```
pip install -e .[test]
pytest
```