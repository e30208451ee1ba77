# weatherservice

A small weather forecast API handler for an API gateway proxy
integration. A request names a location and a day; the service answers
with that day's maximum temperature, maximum UV index and maximum chance
of rain.

Forecasts come from the Open-Meteo daily forecast endpoint. Every day of
a fetched forecast is stored in a DynamoDB table together with an expiry
time, so later requests for the same place and day can be answered from
the cache.

The package has no dependencies outside the standard library.

## Request

`WeatherService.handle_request(event, context)` reads three entries of
the event's `queryStringParameters`:

| Parameter | Required | Meaning                                     |
|-----------|----------|---------------------------------------------|
| `lat`     | yes      | latitude                                    |
| `lon`     | yes      | longitude                                   |
| `date`    | no       | day in `YYYY-MM-DD` form, defaults to today |

The day must not be before today (in UTC) and must not lie more than
seven days after the current time.

It returns a `ProxyResponse`; `to_dict()` gives the
`{"statusCode", "headers", "body"}` mapping an API gateway expects.
A successful answer has status 200, a `Content-Type: application/json`
header and a body such as:

```json
{"date":"2025-07-10","latitude":"42.0","longitude":"23.0","temperature":23,"uvIndex":3,"rainProbability":0}
```

Errors come back as plain-text bodies:

| Status | Body                                                  |
|--------|-------------------------------------------------------|
| 400    | `Missing lat/lon`                                     |
| 400    | `Invalid date`                                        |
| 400    | `Invalid date: Date could not be older than today`    |
| 400    | `Invalid date: Date could not be 7 day from today`    |
| 400    | `[<id>] Error while generating response`              |
| 404    | `[<id>] Weather forecast not found for this date`     |
| 500    | `[<id>] Weather api error`                            |

The `<id>` is a fresh identifier that is also written to the error log
by `weatherservice.errorlog.log_error`, so a failed request can be found
in the logs. The "Error while generating response" answer is given when
a number in the forecast is not finite.

A failure while reading the cache is treated as a cache miss; a failure
while writing to it is logged and does not change the answer.

### Cache keys

Lookups use the key `<lat>_<lon>_<date>` with `lat` and `lon` exactly as
given in the request. Forecasts are stored under keys built from the
latitude and longitude the forecast provider returned, formatted with
four decimals (for example `42.0000_23.0000_2025-07-10`). A request is
therefore answered from the cache when its coordinates are written in
that same form.

## Configuration

`weatherservice.app.load_app_config(environ=None)` reads these variables
from `environ`, or from `os.environ` when none is given:

| Variable         | Meaning                                                        |
|------------------|----------------------------------------------------------------|
| `OPEN_MATEO_URL` | forecast URL template with two `%s` slots: latitude, longitude |
| `DYNAMODB_TABLE` | name of the DynamoDB table used as the cache                   |
| `TTL_MINUTES`    | how long a cached forecast stays valid, in minutes             |

Missing variables give an empty string or `0`. A `TTL_MINUTES` that is
not an integer raises `ConfigError`.

A suitable URL template asks for the daily fields
`temperature_2m_max,uv_index_max,precipitation_probability_max` with
`timezone=auto`.

## Use

```python
from weatherservice.app import create_service, load_app_config

config = load_app_config()
service = create_service(config, dynamodb_client)


def handler(event, context):
    return service.handle_request(event, context).to_dict()
```

`dynamodb_client` is a low-level DynamoDB client: the cache calls
`put_item(TableName=..., Item=...)` and `get_item(TableName=..., Key=...)`
on it with attribute-value maps, and reads `"Item"` from the result of
`get_item`. `create_service` also takes an optional `fetch` function that
downloads a URL and returns the body as bytes or text; by default it is
`weatherservice.weather.urllib_fetch`, which uses `urllib` and returns
the body whatever the HTTP status.

The pieces can also be used on their own:

- `weatherservice.weather.OpenMeteoClient(fetch, url)` fetches a forecast
  with `get_forecast(lat, long)` and returns a dict of day to `Forecast`;
  `parse_forecast(payload)` turns an Open-Meteo JSON payload into the
  same dict and raises `ValueError` on a malformed one.
- `weatherservice.cache.DynamoDBCache(client, table_name, ttl_minutes)`
  stores `CachedWeather` records with `put(key, weather)`, setting the
  key and an expiry time, and loads them with `get(key)`, which returns
  `None` for a missing or expired record and raises `ValueError` for an
  empty key. `CachedWeather.to_item()` and `CachedWeather.from_item()`
  convert to and from DynamoDB attribute-value maps.
- `weatherservice.handler` holds `WeatherService`,
  `WeatherServiceResponse`, `ProxyResponse`, `cached_data_to_response`
  and `forecast_to_cached_data`. `WeatherService` takes an optional
  `clock` returning the current `datetime`.

All messages go through the standard `logging` module; the package does
not configure handlers or formats.

## What it does not do

- It has no command and no server of its own; it only builds responses
  for events handed to `handle_request`.
- It does not create a DynamoDB client, choose a region or create the
  cache table. Expired records are left in the table and are only
  skipped on reading; removing them is up to the table's own expiry
  setting on the `TTL` attribute.

## Tests

The tests use pytest and are installed with the `test` extra:

```
pip install .[test]
pytest
```