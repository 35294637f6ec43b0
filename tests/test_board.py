import pytest

from napoleonchess.bitboard import parse_square
from napoleonchess.board import Board
from napoleonchess.move import EMPTY, Color, Move, MoveType, Piece, PieceType
from napoleonchess.position import START_FEN, CastlingRights, PositionError

CASTLE_FEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
EP_FEN = "4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1"
PROMO_FEN = "1r2k3/P7/8/8/8/8/8/4K3 w - - 0 1"


def sq(name):
    return parse_square(name)


def play(board, *moves):
    parsed = []
    for text in moves:
        move = board.parse_move(text)
        board.make_move(move)
        parsed.append(move)
    return parsed


def test_parse_plain_move():
    board = Board()
    move = board.parse_move("e2e4")
    assert move == Move(sq("e2"), sq("e4"))


def test_parse_castling_move():
    board = Board(CASTLE_FEN)
    assert board.parse_move("e1g1").is_castle_oo()
    assert board.parse_move("e8c8").is_castle_ooo()


def test_parse_promotion():
    board = Board(PROMO_FEN)
    move = board.parse_move("a7a8q")
    assert move.promoted_piece() is PieceType.QUEEN
    assert board.parse_move("a7b8n").promoted_piece() is PieceType.KNIGHT


def test_parse_en_passant():
    board = Board(EP_FEN)
    assert board.parse_move("e5d6").is_en_passant()


@pytest.mark.parametrize("text", ["e2", "e2e4e5", "z9e4", "a7a8k"])
def test_parse_rejects_bad_text(text):
    board = Board(PROMO_FEN)
    with pytest.raises(ValueError):
        board.parse_move(text)


def test_double_push_sets_en_passant_and_flips_side():
    board = Board()
    play(board, "e2e4")
    assert board.fen() == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
    assert board.current_ply == 1


def test_make_undo_round_trip():
    board = Board()
    moves = play(board, "e2e4", "d7d5", "e4d5", "d8d5", "g1f3", "c8g4")
    for move in reversed(moves):
        board.undo_move(move)
    assert board.fen() == Board().fen()
    assert board.current_ply == 0
    assert board.pos_is_ok()


def test_kingside_castle_moves_rook_and_clears_rights():
    board = Board(CASTLE_FEN)
    (move,) = play(board, "e1g1")
    assert board.piece_on(sq("g1")) == Piece(Color.WHITE, PieceType.KING)
    assert board.piece_on(sq("f1")) == Piece(Color.WHITE, PieceType.ROOK)
    assert board.piece_on(sq("h1")) == EMPTY
    assert not board.castling_status & (CastlingRights.WHITE_OO | CastlingRights.WHITE_OOO)
    assert board.castling_status & CastlingRights.BLACK_OO
    assert board.castled[Color.WHITE]
    board.undo_move(move)
    assert board.fen() == CASTLE_FEN


def test_queenside_castle_round_trip():
    board = Board(CASTLE_FEN.replace(" w ", " b "))
    before = board.fen()
    (move,) = play(board, "e8c8")
    assert board.piece_on(sq("d8")) == Piece(Color.BLACK, PieceType.ROOK)
    assert board.piece_on(sq("a8")) == EMPTY
    board.undo_move(move)
    assert board.fen() == before
    assert not board.castled[Color.BLACK]


def test_rook_move_clears_one_right():
    board = Board(CASTLE_FEN)
    play(board, "h1h2")
    white_rights = CastlingRights.WHITE_OO | CastlingRights.WHITE_OOO
    black_rights = CastlingRights.BLACK_OO | CastlingRights.BLACK_OOO
    assert int(board.castling_status & white_rights) == int(CastlingRights.WHITE_OOO)
    assert int(board.castling_status & black_rights) == int(black_rights)
    assert board.fen() == "r3k2r/8/8/8/8/8/7R/R3K3 b Qkq - 0 1"


def test_capturing_rook_clears_enemy_right():
    board = Board(CASTLE_FEN)
    move, = play(board, "a1a8")
    assert not board.castling_status & CastlingRights.BLACK_OOO
    assert not board.castling_status & CastlingRights.WHITE_OOO
    assert board.castling_status & CastlingRights.BLACK_OO
    board.undo_move(move)
    assert board.piece_on(sq("a8")) == Piece(Color.BLACK, PieceType.ROOK)
    assert board.fen() == CASTLE_FEN


def test_en_passant_capture_and_undo():
    board = Board(EP_FEN)
    (move,) = play(board, "e5d6")
    assert board.piece_on(sq("d5")) == EMPTY
    assert board.piece_on(sq("d6")) == Piece(Color.WHITE, PieceType.PAWN)
    assert board.num_of_pieces(Color.BLACK, PieceType.PAWN) == 0
    assert board.pawns_on_file(Color.WHITE, 3) == 1
    assert board.en_passant_square is None
    board.undo_move(move)
    assert board.fen() == EP_FEN
    assert board.pawns_on_file(Color.BLACK, 3) == 1


def test_promotion_with_capture_and_undo():
    board = Board(PROMO_FEN)
    (move,) = play(board, "a7b8q")
    assert board.piece_on(sq("b8")) == Piece(Color.WHITE, PieceType.QUEEN)
    assert board.num_of_pieces(Color.WHITE, PieceType.PAWN) == 0
    assert board.num_of_pieces(Color.BLACK, PieceType.ROOK) == 0
    board.undo_move(move)
    assert board.fen() == PROMO_FEN
    assert board.num_of_pieces(Color.WHITE, PieceType.QUEEN) == 0


def test_half_move_clock():
    board = Board()
    play(board, "g1f3")
    assert board.half_move_clock == 1
    play(board, "e7e5")
    assert board.half_move_clock == 0
    play(board, "f3e5")
    assert board.half_move_clock == 0


def test_is_attacked():
    board = Board()
    assert board.is_attacked(1 << sq("f3"), Color.BLACK)
    assert not board.is_attacked(1 << sq("e4"), Color.BLACK)
    assert board.is_attacked(1 << sq("f6"), Color.WHITE)
    rook = Board("4k3/8/8/8/8/8/8/r3K3 w - - 0 1")
    assert rook.is_attacked(rook.pieces(Color.WHITE, PieceType.KING), Color.WHITE)
    assert not rook.is_attacked(1 << sq("e2"), Color.WHITE)


def test_null_move_round_trip():
    board = Board()
    play(board, "e2e4")
    before = board.fen()
    board.make_null_move()
    assert board.side_to_move is Color.WHITE
    assert board.en_passant_square is None
    assert not board.allow_null_move
    board.undo_null_move()
    assert board.fen() == before
    assert board.allow_null_move
    assert board.current_ply == 1


def test_repetition():
    board = Board()
    play(board, "g1f3", "g8f6", "f3g1")
    assert not board.is_repetition()
    play(board, "f6g8")
    assert board.fen() == START_FEN
    assert board.is_repetition()


def test_undo_without_history_raises():
    board = Board()
    with pytest.raises(PositionError):
        board.undo_move(Move(sq("e2"), sq("e4")))
    with pytest.raises(PositionError):
        board.undo_null_move()


def test_move_from_empty_square_raises():
    board = Board()
    with pytest.raises(ValueError):
        board.make_move(Move(sq("e4"), sq("e5")))
    assert board.fen() == START_FEN


def test_en_passant_without_square_raises():
    board = Board()
    with pytest.raises(ValueError):
        board.make_move(Move(sq("e2"), sq("d3"), MoveType.EN_PASSANT))
    assert board.current_ply == 0


def test_load_resets_history():
    board = Board()
    play(board, "e2e4")
    board.load(CASTLE_FEN)
    assert board.current_ply == 0
    with pytest.raises(PositionError):
        board.undo_move(Move(sq("e2"), sq("e4")))