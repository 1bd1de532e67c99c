# verixilac

A library for running rounds of **Xì Lác**, the Vietnamese variant of
blackjack, together with the pieces a chat bot needs around it:

- `verixilac.game` — cards and hand scoring (`cards`), payout rules
  (`rules`), players (`player`, `player_in_game`), rooms (`room`), a single
  round (`game`) and a `GameManager` (`manager`) that ties them together and
  keeps players and rooms in a JSON file.
- `verixilac.stats` — per-player, per-role and head-to-head statistics
  (`records`), kept in a JSON file by `StatsTracker` (`tracker`).
- `verixilac.telegram` — inline keyboard layouts (`buttons`) and recipient
  filtering (`recipients`) for game messages.
- `verixilac.vhwebhook` — a reconnecting WebSocket client, `VHWebHook`, that
  receives webhook requests relayed by an ingress proxy.
- `verixilac.config` — settings read from environment variables.
- `verixilac.stringer` — Markdown and MarkdownV2 escaping.

## Hands and scoring

Cards are numbered 0–51: the value is the id modulo 13 (ace, 2–10, J, Q, K)
and the suit is the id divided by 13 (♥, ♦, ♣, ♠).

```python
from verixilac.game.cards import ResultType, new_cards

hand = new_cards(0, 9)                      # A♥ 10♥
hand.is_black_jack()                        # True
hand.result_type() is ResultType.BLACK_JACK # True

hand = new_cards(0, 0, 5)                   # A♥ A♥ 6♥
hand.value()                                # 18
```

`ResultType` orders hands from best to worst: two aces (*Xì Bàn*), an ace
with a ten-value card (*Xì Lác*), five cards at 21 or less (*Ngũ Linh*), a
normal hand, a busted hand (22–27), a hand of 28 or more, and a hand that is
still too low. A participant below 16 points (a dealer below 15) may not
stand yet. `Cards.render` gives the hand as MarkdownV2 text, hidden when
asked to censor it.

## Comparing hands and payouts

`compare(dealer, participant)` in `verixilac.game.game` returns a `Result`
(`WIN`, `DRAW` or `LOSE`) from the dealer's side, and
`get_reward(rule, dealer, participant)` turns that into the amount the
dealer gains from the participant (negative when the dealer pays), using the
multipliers of a `Rule`. `get_rule` in `verixilac.game.rules` looks a rule up
by id and falls back to the default one; `RULE_LIST_TEXT` lists them.

## Running a round

```python
from verixilac.game.manager import GameManager

manager = GameManager(200, 1000, 60.0,
                      storage_file="data.json", stats_file="stats.json")
dealer = manager.player_register("1", "An")
room = manager.new_room(dealer)

player = manager.player_register("2", "Binh")
manager.join_room(player, room)

game = manager.new_game(room, dealer)
manager.player_bet(game, player, 50)
manager.deal(game)
manager.start(game)
```

From there `player_hit`, `player_stand`, `player_pass`, `finish_game` and
`cancel_game` move the round along; `on_new_room`, `on_new_game`,
`on_player_bet`, `on_player_play`, `on_game_finish` and the other `on_*`
methods register callbacks. Rule violations raise subclasses of
`verixilac.game.errors.GameError` whose messages are in Vietnamese and meant
for players. Finished rounds are added to the manager's `StatsTracker`;
`save_to_storage` and `load_from_storage` write and read players and rooms.

## Configuration

```python
from verixilac.config import read_bot_config

config = read_bot_config("", environ={"TELEGRAM_BOT_TOKEN": "token"})
config.max_bet    # 200
config.timeout    # 60.0
```

`TELEGRAM_BOT_TOKEN` is required. `MAX_BET` (default 200), `MIN_DEAL`
(default 1000) and `TIMEOUT` (default `1m`, read by `parse_duration`) are
optional, as are `TELEGRAM_BOT_PUBLIC_URL`, `TELEGRAM_BOT_INGRESS_URL`,
`TELEGRAM_BOT_INGRESS_APP_NAME` and `TELEGRAM_BOT_INGRESS_TOKEN`. A bad or
missing value raises `ConfigError`. Without `environ`, `os.environ` is read.

## Text for chat messages

Messages are built as Telegram MarkdownV2; user-supplied text goes through
`escape_markdown_v2`:

```python
from verixilac.stringer import escape_markdown_v2

escape_markdown_v2("1+1=2.")     # '1\\+1\\=2\\.'
```

## What this package does not do

It has no command to start and does not talk to the Telegram Bot API itself:
there is no bot that polls for updates, handles chat commands or sends the
game messages. It provides the game engine, statistics, message text,
keyboard layouts, configuration and the ingress WebSocket client that such a
bot would be built from.

## Tests

The test suite uses pytest and pytest-asyncio, available through the
`test` extra.