"""Attack queries, move legality, static exchange evaluation and SAN output."""

from __future__ import annotations

from napoleonchess.bitboard import bit_squares, file_of, rank_of, square_name
from napoleonchess.board import Board
from napoleonchess.move import Color, Move, Piece, PieceType
from napoleonchess.movedatabase import get_database

PIECE_VALUES = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 20000,
    PieceType.NONE: 0,
}

_ATTACKER_ORDER = (
    PieceType.PAWN,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
    PieceType.KING,
)


def pinned_pieces(board: Board) -> int:
    """Pieces of the side to move that are pinned to their own king."""
    db = get_database()
    us = board.side_to_move
    enemy = us.opposite()
    king = board.king_square(us)
    queens = board.pieces(enemy, PieceType.QUEEN)
    pinners = (
        (board.pieces(enemy, PieceType.ROOK) | queens) & db.pseudo_rook_attacks[king]
    ) | ((board.pieces(enemy, PieceType.BISHOP) | queens) & db.pseudo_bishop_attacks[king])

    occupied = board.occupied
    player = board.player_pieces()
    pinned = 0
    for square in bit_squares(pinners):
        between = db.obstructed[square][king] & occupied
        if between and not between & (between - 1) and between & player:
            pinned |= between
    return pinned


def is_move_legal(board: Board, move: Move, pinned: int) -> bool:
    """True when a pseudo-legal move does not leave the mover's king in check."""
    us = board.side_to_move
    from_square, to_square = move.from_square(), move.to_square()

    if board.piece_on(from_square).piece_type is PieceType.KING:
        return not board.is_attacked(1 << to_square, us)

    if move.is_en_passant():
        board.make_move(move)
        try:
            return not board.is_attacked(board.pieces(us, PieceType.KING), us)
        finally:
            board.undo_move(move)

    if not pinned or not pinned >> from_square & 1:
        return True
    return get_database().are_aligned(from_square, to_square, board.king_square(us))


def king_attackers(board: Board, square: int, color: Color) -> int:
    """Enemy pawns, knights and sliders that attack ``square`` for ``color``'s king."""
    db = get_database()
    opp = color.opposite()
    occupied = board.occupied
    queens = board.pieces(opp, PieceType.QUEEN)
    return (
        (db.pawn_attacks[color][square] & board.pieces(opp, PieceType.PAWN))
        | (db.knight_attacks[square] & board.pieces(opp, PieceType.KNIGHT))
        | (db.bishop_attacks(occupied, square) & (board.pieces(opp, PieceType.BISHOP) | queens))
        | (db.rook_attacks(occupied, square) & (board.pieces(opp, PieceType.ROOK) | queens))
    )


def attacks_to(board: Board, square: int, color: Color, occupied: int) -> int:
    """Pieces of ``color`` attacking ``square`` with the given occupancy."""
    db = get_database()
    opp = color.opposite()
    queens = board.pieces(color, PieceType.QUEEN)
    return (
        (db.king_attacks[square] & board.pieces(color, PieceType.KING))
        | (db.pawn_attacks[opp][square] & board.pieces(color, PieceType.PAWN))
        | (db.knight_attacks[square] & board.pieces(color, PieceType.KNIGHT))
        | (db.bishop_attacks(occupied, square) & (board.pieces(color, PieceType.BISHOP) | queens))
        | (db.rook_attacks(occupied, square) & (board.pieces(color, PieceType.ROOK) | queens))
    )


def moves_to(board: Board, square: int, color: Color, occupied: int) -> int:
    """Pieces of ``color`` that could move to ``square``, pawns one or two ranks behind included."""
    db = get_database()
    enemy = color.opposite()
    pawns = board.pieces(color, PieceType.PAWN)

    pawn = 0
    if color is Color.WHITE:
        if square >= 16:
            pawn |= (1 << (square - 16)) & pawns
        if square >= 8:
            pawn |= (1 << (square - 8)) & pawns
    else:
        if square <= 63 - 16:
            pawn |= (1 << (square + 16)) & pawns
        if square <= 63 - 8:
            pawn |= (1 << (square + 8)) & pawns

    pawn_captures = 0
    if board.color_pieces(enemy) >> square & 1:
        pawn_captures = db.pawn_attacks[enemy][square] & pawns

    queens = board.pieces(color, PieceType.QUEEN)
    return (
        (db.king_attacks[square] & board.pieces(color, PieceType.KING))
        | pawn_captures
        | pawn
        | (db.knight_attacks[square] & board.pieces(color, PieceType.KNIGHT))
        | (db.bishop_attacks(occupied, square) & (board.pieces(color, PieceType.BISHOP) | queens))
        | (db.rook_attacks(occupied, square) & (board.pieces(color, PieceType.ROOK) | queens))
    )


def least_valuable_attacker(board: Board, color: Color, attackers: int) -> tuple[int, PieceType]:
    """Return the cheapest attacker of ``color`` as a one-square bitboard and its type."""
    for piece_type in _ATTACKER_ORDER:
        found = board.pieces(color, piece_type) & attackers
        if found:
            return found & -found, piece_type
    return 0, PieceType.NONE


def see(board: Board, move: Move) -> int:
    """Static exchange evaluation of a capture, from the mover's point of view."""
    to_square, from_square = move.to_square(), move.from_square()
    captured = (
        PieceType.PAWN if move.is_en_passant() else board.piece_on(to_square).piece_type
    )
    attacking = board.piece_on(from_square).piece_type
    if captured is PieceType.NONE or attacking is PieceType.NONE:
        raise ValueError(f"{move} is not a capture in this position")

    gains = [PIECE_VALUES[captured]]
    side = board.side_to_move.opposite()
    occupied = board.occupied ^ (1 << from_square)
    attackers = attacks_to(board, to_square, side, occupied) & occupied

    while attackers:
        gains.append(PIECE_VALUES[attacking] - gains[-1])
        from_set, attacking = least_valuable_attacker(board, side, attackers)
        occupied ^= from_set
        side = side.opposite()
        attackers = attacks_to(board, to_square, side, occupied) & occupied

    for depth in range(len(gains) - 1, 0, -1):
        gains[depth - 1] = -max(-gains[depth - 1], gains[depth])
    return gains[0]


def to_san(board: Board, move: Move) -> str:
    """Return the move in standard algebraic notation, without check marks."""
    if move.is_castle():
        return "O-O" if move.is_castle_oo() else "O-O-O"

    from_square, to_square = move.from_square(), move.to_square()
    piece = board.piece_on(from_square)
    if piece.is_empty:
        raise ValueError(f"no piece on the origin square of {move}")

    side = board.side_to_move
    capture = board.is_capture(move)
    origin = square_name(from_square)
    san = ""

    if piece.piece_type is not PieceType.PAWN:
        san = piece.initial().upper()
        attackers = (
            moves_to(board, to_square, side, board.occupied) & board.pieces(side, piece.piece_type)
        ) & ~(1 << from_square)
        others = attackers
        same_rank = same_file = False
        pinned = pinned_pieces(board)
        for square in bit_squares(attackers):
            if not is_move_legal(board, Move(square, to_square), pinned):
                others &= ~(1 << square)
                continue
            if rank_of(square) == rank_of(from_square):
                same_rank = True
            elif file_of(square) == file_of(from_square):
                same_file = True

        if others:
            if not same_file:
                san += origin[0]
            elif not same_rank:
                san += origin[1]
            else:
                san += origin
    elif capture:
        san = origin[0]

    if capture:
        san += "x"
    san += square_name(to_square)
    if move.is_promotion():
        san += "=" + Piece(Color.WHITE, move.promoted_piece()).initial()
    return san