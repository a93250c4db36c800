"""Socket.IO event names shared by the game layer and the handlers."""

# Inbound (client -> server)
CREATE_ROOM = "createRoom"
JOIN_ROOM = "joinRoom"
LEAVE_ROOM = "leaveRoom"
CHOOSE_WORD = "chooseWord"
DRAW = "draw"
CLEAR_CANVAS = "clearCanvas"
CHAT_MESSAGE = "chatMessage"

# Outbound (server -> client)
ROOM_JOINED = "roomJoined"
ROOM_ERROR = "roomError"
INVALID_CODE = "invalidCode"
ROOM_FULL = "roomFull"
UPDATE_PLAYERS = "updatePlayers"
NEW_ROUND = "newRound"
YOUR_TURN = "yourTurn"
WORD_HINT = "wordHint"
SECRET_WORD = "secretWord"
AUTO_CHOOSE_WORD = "autoChooseWord"
TIMER = "timer"
MESSAGE = "message"
CORRECT_GUESS = "correctGuess"
WORD_REVEAL = "wordReveal"
GAME_OVER = "gameOver"

SYSTEM_USER = "System"
