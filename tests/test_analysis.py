import pytest

from napoleonchess.analysis import (
    PIECE_VALUES,
    attacks_to,
    is_move_legal,
    king_attackers,
    least_valuable_attacker,
    moves_to,
    pinned_pieces,
    see,
    to_san,
)
from napoleonchess.bitboard import parse_square
from napoleonchess.board import Board
from napoleonchess.move import Color, Move, PieceType


def bit(name):
    return 1 << parse_square(name)


PINNED_KNIGHT = "k3r3/8/8/8/8/8/4N3/4K3 w - - 0 1"


def test_pinned_knight_detected():
    board = Board(PINNED_KNIGHT)
    assert pinned_pieces(board) == bit("e2")


def test_two_blockers_mean_no_pin():
    board = Board("k3r3/8/8/8/8/4P3/4N3/4K3 w - - 0 1")
    assert pinned_pieces(board) == 0


def test_enemy_blocker_is_not_pinned():
    board = Board("k3r3/8/8/8/8/8/4n3/4K3 w - - 0 1")
    assert pinned_pieces(board) == 0


def test_start_position_has_no_pins():
    assert pinned_pieces(Board()) == 0


def test_pinned_knight_cannot_move():
    board = Board(PINNED_KNIGHT)
    pinned = pinned_pieces(board)
    move = Move(parse_square("e2"), parse_square("c3"))
    assert is_move_legal(board, move, pinned) is False


def test_pinned_rook_may_move_along_pin():
    board = Board("k3r3/8/8/8/8/8/4R3/4K3 w - - 0 1")
    pinned = pinned_pieces(board)
    assert pinned == bit("e2")
    along = Move(parse_square("e2"), parse_square("e5"))
    across = Move(parse_square("e2"), parse_square("a2"))
    assert is_move_legal(board, along, pinned) is True
    assert is_move_legal(board, across, pinned) is False


def test_king_cannot_step_into_attack():
    board = Board(PINNED_KNIGHT)
    pinned = pinned_pieces(board)
    assert is_move_legal(board, Move(parse_square("e1"), parse_square("d1")), pinned) is True
    assert is_move_legal(board, Move(parse_square("e1"), parse_square("f2")), pinned) is True
    board_r = Board("k4r2/8/8/8/8/8/8/4K3 w - - 0 1")
    move = Move(parse_square("e1"), parse_square("f1"))
    assert is_move_legal(board_r, move, pinned_pieces(board_r)) is False


def test_en_passant_exposing_king_is_illegal_and_board_restored():
    fen = "7k/8/8/KPp4r/8/8/8/8 w - c6 0 1"
    board = Board(fen)
    move = board.parse_move("b5c6")
    assert move.is_en_passant()
    before = board.fen()
    assert is_move_legal(board, move, pinned_pieces(board)) is False
    assert board.fen() == before


def test_en_passant_legal_when_safe():
    board = Board("7k/8/8/1Pp5/8/8/8/K7 w - c6 0 1")
    move = board.parse_move("b5c6")
    assert is_move_legal(board, move, pinned_pieces(board)) is True


def test_king_attackers():
    start = Board()
    assert king_attackers(start, parse_square("e1"), Color.WHITE) == 0
    board = Board("4k3/8/8/8/8/3n4/8/4K3 w - - 0 1")
    assert king_attackers(board, parse_square("e1"), Color.WHITE) == bit("d3")


def test_attacks_to_start_position():
    board = Board()
    result = attacks_to(board, parse_square("f3"), Color.WHITE, board.occupied)
    assert result == bit("g1") | bit("e2") | bit("g2")
    assert attacks_to(board, parse_square("f3"), Color.BLACK, board.occupied) == 0


def test_moves_to_includes_pawns_behind():
    board = Board()
    occupied = board.occupied
    assert moves_to(board, parse_square("e4"), Color.WHITE, occupied) == bit("e2")
    assert moves_to(board, parse_square("f3"), Color.WHITE, occupied) == bit("g1") | bit("f2")
    assert moves_to(board, parse_square("e5"), Color.BLACK, occupied) == bit("e7")


def test_least_valuable_attacker():
    board = Board()
    attackers = attacks_to(board, parse_square("f3"), Color.WHITE, board.occupied)
    assert least_valuable_attacker(board, Color.WHITE, attackers) == (bit("e2"), PieceType.PAWN)
    assert least_valuable_attacker(board, Color.WHITE, 0) == (0, PieceType.NONE)
    knight_only = attackers & board.pieces(Color.WHITE, PieceType.KNIGHT)
    assert least_valuable_attacker(board, Color.WHITE, knight_only) == (
        bit("g1"),
        PieceType.KNIGHT,
    )


def test_see_undefended_capture():
    board = Board("4k3/8/8/3n4/4P3/8/8/4K3 w - - 0 1")
    move = Move(parse_square("e4"), parse_square("d5"))
    assert see(board, move) == PIECE_VALUES[PieceType.KNIGHT]


def test_see_defended_capture():
    board = Board("4k3/8/2p5/3n4/4P3/8/8/4K3 w - - 0 1")
    move = Move(parse_square("e4"), parse_square("d5"))
    assert see(board, move) == PIECE_VALUES[PieceType.KNIGHT] - PIECE_VALUES[PieceType.PAWN]


def test_see_losing_capture_is_negative():
    board = Board("4k3/8/2p5/3p4/8/8/8/3QK3 w - - 0 1")
    move = Move(parse_square("d1"), parse_square("d5"))
    assert see(board, move) < 0


def test_see_rejects_non_capture():
    board = Board()
    with pytest.raises(ValueError):
        see(board, Move(parse_square("e2"), parse_square("e4")))


def test_san_simple_moves():
    board = Board()
    assert to_san(board, board.parse_move("g1f3")) == "Nf3"
    assert to_san(board, board.parse_move("e2e4")) == "e4"


def test_san_castles():
    board = Board("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    assert to_san(board, board.parse_move("e1g1")) == "O-O"
    assert to_san(board, board.parse_move("e1c1")) == "O-O-O"


def test_san_pawn_capture():
    board = Board("4k3/8/8/3p4/4P3/8/8/4K3 w - - 0 1")
    san = to_san(board, board.parse_move("e4d5"))
    assert san == "exd5"
    assert san.endswith("d5") and "x" in san


def test_san_file_disambiguation():
    board = Board("4k3/8/8/8/8/8/8/1N2KN2 w - - 0 1")
    assert to_san(board, board.parse_move("b1d2")) == "Nbd2"
    assert to_san(board, board.parse_move("f1d2")) == "Nfd2"


def test_san_rank_disambiguation():
    board = Board("4k3/8/8/8/8/1N6/8/1N2K3 w - - 0 1")
    assert to_san(board, board.parse_move("b1d2")) == "N1d2"


def test_san_ignores_pinned_rival():
    board = Board("k3r3/8/8/8/N7/8/4N3/4K3 w - - 0 1")
    assert to_san(board, board.parse_move("a4c3")) == "Nc3"


def test_san_promotion():
    board = Board("k7/4P3/8/8/8/8/8/4K3 w - - 0 1")
    san = to_san(board, board.parse_move("e7e8q"))
    assert san == "e8=Q"
    assert to_san(board, board.parse_move("e7e8n")).endswith("=N")


def test_san_empty_origin_raises():
    board = Board()
    with pytest.raises(ValueError):
        to_san(board, Move(parse_square("e4"), parse_square("e5")))