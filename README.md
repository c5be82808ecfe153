# chatplugins

A set of self-contained features for chat bots. Each module does one job and
leaves message delivery to you. You pass in what a user sent and get back the
reply text, an image, or a value to store. Failures are raised as exceptions,
or returned as an `ERROR: ...` reply where a module answers whole commands.

## Installation

```
pip install chatplugins
```

To run the tests:

```
pip install "chatplugins[test]"
pytest
```

## Modules

- `chatplugins.diana`: `EssayStore` keeps short essays in an SQLite table,
  keyed by `essay_id(text)`. It provides `add`, `random`, `hentai` (the essay
  stored under one fixed id), `count` and `close`. `handle(store, message, is_admin)`
  answers 小作文 and 发大病. It also answers 教你一篇小作文… when `is_admin` is true.
  For any other message it returns `None`.
- `chatplugins.driftbottle`: drift bottles kept in SQLite. `Sea` has `throw`,
  `pick` and `close`. `prepare_throw` unescapes the raw message, refuses one
  shorter than 10 characters with `ValueError`, and builds a `Bottle`.
  `make_bottle` gives each bottle a CRC-64 (`crc64_iso`) id. `format_bottle`
  writes the reply text.
- `chatplugins.funny`: `JokeBook.tell(name)` picks a random joke from an SQLite
  table and puts the name in place of `%name`.
- `chatplugins.event`: settings for accepting friend requests and group
  invitations automatically.
  - `AutoAccept` holds the settings as flags. `set_option` changes them and
    `should_auto_accept` applies them to a request.
  - Request flags are carried as four-character base16384 codes, using
    `encode_flag` and `decode_flag`, which are built on `base14_encode` and
    `base14_decode`.
  - `parse_decision` and `parse_toggle` read the administrator's commands.
  - `format_invite_notice` and `format_friend_notice` write the notices sent
    to the owner.
- `chatplugins.emojimix`: `match` finds two emoji in a message, given either
  as `Segment`s or as the raw text; QQ faces count as emoji. `mix_urls` builds
  the two candidate image links for a pair. `mix` returns the first link that
  answers HTTP 200.
- `chatplugins.epidemic`: `parse_response` reads the regional case tree into
  `Area` objects and `find_city` searches it. `format_report` writes the reply.
  `handle(city, fetch)` does all three for a query.
- `chatplugins.dress`: outfit albums. `dress_list` and `detail` fetch the album
  names and the image count. `image_urls` builds the image links. `menu_text`
  writes the numbered menu. `choose` maps a typed number to an album and
  `random_name` picks one at random.
- `chatplugins.github`: repository search. `parse_command` reads
  `>github [-p |-t ]query`. `search` returns the first repository found.
  `respond` turns a command into `("text", ...)` and `("image", ...)` reply parts.
- `chatplugins.font`: `parse_command` reads `(用<字体>)渲染文字<text>`.
  `resolve_font` maps the font choice to a path in a mapping you supply. The
  keys are `syumatu`, `nisi`, `violet`, `sakura`, `consolas` and `default`.
  `render_text` draws wrapped text into a Pillow image, and `render_to_base64`
  returns that image as a base64-encoded PNG. A font path of `None` uses
  Pillow's built-in font.
- `chatplugins.fortune`: the daily fortune slip.
  - `style_index` and `style_for` translate between background style names
    and stored setting values.
  - `pick_index` gives a choice that stays the same for one user during one day.
  - `random_background` opens that day's picture from a zip archive.
  - `text_positions` lays out the vertical slip text, and `draw` puts the
    title and text onto the background.
  - `cache_key` names a drawn slip.
- `chatplugins.genshin`: a ten-pull gacha.
  - `GachaArchive` reads the picture archive.
  - `roll(count, five_star_mode)` draws a `Pull`. In the default pool, every
    ninth roll starts with a five-star, and a pull always holds at least one
    four-star.
  - `render` composes the result image.
  - `is_five_star_mode` and `set_mode` read and switch the pool setting.

## Example

```python
from chatplugins.driftbottle import Sea, prepare_throw, format_bottle

with Sea("sea.db") as sea:
    bottle = prepare_throw(10001, 20002, 1_700_000_000, "alice", "a message long enough to throw")
    sea.throw(bottle)
    print(format_bottle(sea.pick(), "bot"))
```

Some functions reach the network. Each of them takes an optional callable, so
you can use any HTTP client or test offline:

- `epidemic.query_epidemic`, `epidemic.handle`, `dress.dress_list` and
  `dress.detail` take `fetch(url) -> bytes`.
- `github.search` and `github.respond` take `fetch(url, headers) -> bytes`.
- `emojimix.mix` takes `head(url) -> status code`.

When no callable is given, they use `requests`.

## What this package does not do

- **No bot framework.** It does not connect to a chat service, receive events,
  check permissions or send messages. You wire its functions into your own
  handlers.
- **No command.** It has no command to run.
- **No data files.** It ships no essay or joke databases, no fortune
  backgrounds or slip texts, no fonts and no gacha archive. You supply these
  paths yourself.
- **No storage for settings or drawn pictures.**
  - Per-group settings, such as the auto-accept flags, the fortune style and
    the gacha mode, are plain integers that you keep.
  - The fortune and gacha functions return Pillow images. They do not cache
    them to disk; `cache_key` only gives a file name.