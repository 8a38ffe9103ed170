"""
amphipod_sorter.py
A solver for the amphipod burrow sorting puzzle.

Each room of the burrow has to end up holding only its own kind of
amphipod. Amphipods travel through a shared hallway, and every kind
pays a different energy cost per step. This solver uses branch and
bound to find the minimum total energy needed to sort the burrow.

Accepts the burrow diagram from stdin:

  #############
  #...........#
  ###B#C#B#D###
    #A#D#C#A#
    #########

Example run:
  $ python amphipod_sorter.py < burrow.txt
"""

# =============================================================================

import sys
from collections import Counter
from enum import Enum

# =============================================================================


class MoveException(Exception):
    """An error that occurs while moving an amphipod.

    The move primitives never validate legality, so this only signals a
    move made from an empty location or onto an occupied one.
    """


# =============================================================================


class Token(Enum):
    """The four kinds of amphipods."""

    AMBER = "A"
    BRONZE = "B"
    COPPER = "C"
    DESERT = "D"

    @classmethod
    def from_letter(cls, letter):
        try:
            return cls(letter)
        except ValueError:
            raise ValueError(f"invalid amphipod letter: {letter!r}") from None

    @property
    def destination(self):
        """The index of the room this kind belongs in."""
        return "ABCD".index(self.value)

    @property
    def cost(self):
        """The energy spent for a single step."""
        return 10 ** self.destination

    def __str__(self):
        return self.value


# =============================================================================


class Board:
    """The hallway and the rooms of the burrow."""

    # Hallway coordinates of the slots an amphipod may stop on
    SLOT_POSITIONS = (0, 1, 3, 5, 7, 9, 10)
    # Hallway coordinates of the room entrances
    COLUMN_POSITIONS = (2, 4, 6, 8)
    NUM_COLUMNS = len(COLUMN_POSITIONS)
    # A placeholder value for an empty cell in a diagram
    EMPTY = "."

    class Column:
        """Representation of a room. Index 0 is the top of the room."""

        def __init__(self, capacity, tokens=()):
            self._capacity = capacity
            self._tokens = list(tokens)
            if len(self._tokens) > capacity:
                raise ValueError(
                    f"room holds {len(self._tokens)} amphipods but only "
                    f"has space for {capacity}"
                )

        def __iter__(self):
            return iter(self._tokens)

        def __len__(self):
            return len(self._tokens)

        def __getitem__(self, index):
            return self._tokens[index]

        def __eq__(self, other):
            if self is other:
                return True
            if not isinstance(other, Board.Column):
                return NotImplemented
            return (
                self._capacity == other._capacity
                and self._tokens == other._tokens
            )

        @property
        def capacity(self):
            return self._capacity

        @property
        def free(self):
            """The number of empty cells above the top amphipod."""
            return self._capacity - len(self._tokens)

        @property
        def is_full(self):
            return len(self._tokens) == self._capacity

        @property
        def top(self):
            if len(self._tokens) == 0:
                return None
            return self._tokens[0]

        def pop(self):
            if len(self._tokens) == 0:
                raise MoveException("cannot move out of an empty room")
            return self._tokens.pop(0)

        def push(self, token):
            if self.is_full:
                raise MoveException("cannot move into a full room")
            self._tokens.insert(0, token)

        def copy(self):
            return self.__class__(self._capacity, self._tokens)

    def __init__(self, capacity, columns, corridor=None):
        if len(columns) != Board.NUM_COLUMNS:
            raise ValueError(f"burrow must have {Board.NUM_COLUMNS} rooms")
        if corridor is None:
            corridor = [None] * len(Board.SLOT_POSITIONS)
        if len(corridor) != len(Board.SLOT_POSITIONS):
            raise ValueError(
                f"hallway must have {len(Board.SLOT_POSITIONS)} slots"
            )
        self._capacity = capacity
        self._columns = [Board.Column(capacity, tokens) for tokens in columns]
        self._corridor = list(corridor)

    @classmethod
    def empty(cls, capacity):
        return cls(capacity, [() for _ in range(Board.NUM_COLUMNS)])

    @classmethod
    def parse(cls, lines):
        """Parses a burrow diagram.
        The room rows start at the third line; the last line is the
        bottom wall.
        """
        lines = [line.rstrip("\n") for line in lines]
        if len(lines) < 4:
            raise ValueError("burrow diagram must have at least 4 lines")
        capacity = len(lines) - 3

        hallway = lines[1]
        corridor = []
        for position in Board.SLOT_POSITIONS:
            if len(hallway) <= position + 1:
                raise ValueError(f"hallway row is too short: {hallway!r}")
            cell = hallway[position + 1]
            if cell == Board.EMPTY:
                corridor.append(None)
            else:
                corridor.append(Token.from_letter(cell))

        columns = [[] for _ in range(Board.NUM_COLUMNS)]
        for r in range(capacity):
            row = lines[2 + r]
            for i, column in enumerate(columns):
                offset = 2 * i + 3
                if len(row) <= offset:
                    raise ValueError(f"room row {r+1} is too short: {row!r}")
                cell = row[offset]
                if cell == Board.EMPTY:
                    if len(column) > 0:
                        raise ValueError(
                            f"room {i+1} has an empty space under an "
                            f"amphipod: {row!r}"
                        )
                    continue
                column.append(Token.from_letter(cell))

        board = cls(capacity, columns, corridor)
        counts = board.token_counts()
        for token in Token:
            if counts[token] != capacity:
                raise ValueError(
                    f"amphipod {str(token)!r} appears {counts[token]} times, "
                    f"expected {capacity}"
                )
        return board

    def __str__(self):
        hallway = [Board.EMPTY] * (Board.SLOT_POSITIONS[-1] + 1)
        for position, token in zip(Board.SLOT_POSITIONS, self._corridor):
            if token is not None:
                hallway[position] = str(token)
        rows = ["#" * (len(hallway) + 2), "#" + "".join(hallway) + "#"]
        for r in range(self._capacity):
            cells = []
            for column in self._columns:
                index = r - column.free
                if index < 0:
                    cells.append(Board.EMPTY)
                else:
                    cells.append(str(column[index]))
            if r == 0:
                rows.append("###" + "#".join(cells) + "###")
            else:
                rows.append("  #" + "#".join(cells) + "#")
        rows.append("  " + "#" * (2 * Board.NUM_COLUMNS + 1))
        return "\n".join(rows)

    def __repr__(self):
        columns = tuple(
            "".join(str(token) for token in column) for column in self._columns
        )
        return f"Board({self._capacity}, {columns})"

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self._capacity == other._capacity
            and self._columns == other._columns
            and self._corridor == other._corridor
        )

    def __hash__(self):
        return hash(
            (
                tuple(self._corridor),
                tuple(tuple(column) for column in self._columns),
            )
        )

    @property
    def capacity(self):
        return self._capacity

    @property
    def columns(self):
        return tuple(self._columns)

    @property
    def corridor(self):
        return tuple(self._corridor)

    def copy(self):
        return self.__class__(self._capacity, self._columns, self._corridor)

    def token_counts(self):
        counts = Counter(token for token in self._corridor if token is not None)
        for column in self._columns:
            counts.update(column)
        return counts

    def column_matches(self, column_index):
        """Whether every amphipod in the room already belongs there."""
        return all(
            token.destination == column_index
            for token in self._columns[column_index]
        )

    def is_settled(self):
        return all(
            column.is_full and self.column_matches(i)
            for i, column in enumerate(self._columns)
        )

    def column_accepts(self, column_index):
        return not self._columns[column_index].is_full and self.column_matches(
            column_index
        )

    def available_corridor_slots(self, column_index):
        """Returns the hallway slots reachable from the room entrance."""
        entrance = Board.COLUMN_POSITIONS[column_index]
        slots = range(len(Board.SLOT_POSITIONS))
        left = [s for s in reversed(slots) if Board.SLOT_POSITIONS[s] < entrance]
        right = [s for s in slots if Board.SLOT_POSITIONS[s] > entrance]
        available = []
        for side in (left, right):
            for slot in side:
                if self._corridor[slot] is not None:
                    break
                available.append(slot)
        return available

    def _positions_clear(self, start, end):
        """Whether every slot strictly between two coordinates is empty."""
        low, high = sorted((start, end))
        return all(
            token is None
            for position, token in zip(Board.SLOT_POSITIONS, self._corridor)
            if low < position < high
        )

    def slot_path_clear(self, slot, column_index):
        return self._positions_clear(
            Board.SLOT_POSITIONS[slot], Board.COLUMN_POSITIONS[column_index]
        )

    def column_path_clear(self, origin_index, destination_index):
        return self._positions_clear(
            Board.COLUMN_POSITIONS[origin_index],
            Board.COLUMN_POSITIONS[destination_index],
        )

    def move_to_corridor(self, column_index, slot):
        """Moves the top amphipod of a room onto a hallway slot.
        Returns the energy spent.
        """
        if self._corridor[slot] is not None:
            raise MoveException(f"hallway slot {slot} is occupied")
        origin = self._columns[column_index]
        token = origin.pop()
        self._corridor[slot] = token
        horizontal = abs(
            Board.SLOT_POSITIONS[slot] - Board.COLUMN_POSITIONS[column_index]
        )
        return (origin.free + horizontal) * token.cost

    def move_from_corridor(self, slot, column_index):
        """Moves the amphipod on a hallway slot into a room.
        Returns the energy spent.
        """
        token = self._corridor[slot]
        if token is None:
            raise MoveException(f"hallway slot {slot} is empty")
        destination = self._columns[column_index]
        destination.push(token)
        self._corridor[slot] = None
        horizontal = abs(
            Board.SLOT_POSITIONS[slot] - Board.COLUMN_POSITIONS[column_index]
        )
        return (1 + destination.free + horizontal) * token.cost

    def move_between_columns(self, origin_index, destination_index):
        """Moves the top amphipod of a room straight into another room.
        Returns the energy spent.
        """
        origin = self._columns[origin_index]
        destination = self._columns[destination_index]
        if destination.is_full:
            raise MoveException("cannot move into a full room")
        token = origin.pop()
        destination.push(token)
        horizontal = abs(
            Board.COLUMN_POSITIONS[origin_index]
            - Board.COLUMN_POSITIONS[destination_index]
        )
        vertical = origin.free + destination.free + 1
        return (vertical + horizontal) * token.cost


# =============================================================================


class SearchState:
    """A board along with the energy spent to reach it."""

    def __init__(self, board, cost=0):
        self._board = board
        self._cost = cost

    def __repr__(self):
        return f"SearchState({self._board!r}, cost={self._cost})"

    @property
    def board(self):
        return self._board

    @property
    def cost(self):
        return self._cost

    def is_settled(self):
        return self._board.is_settled()

    def copy(self):
        return self.__class__(self._board.copy(), self._cost)

    def _try_settle(self):
        """Makes one pass of forced moves. Returns the number of moves."""
        board = self._board
        moves = 0
        for column_index, column in enumerate(board.columns):
            token = column.top
            if token is None or token.destination == column_index:
                continue
            if board.column_accepts(
                token.destination
            ) and board.column_path_clear(column_index, token.destination):
                self._cost += board.move_between_columns(
                    column_index, token.destination
                )
                moves += 1
        for slot, token in enumerate(board.corridor):
            if token is None:
                continue
            if board.column_accepts(
                token.destination
            ) and board.slot_path_clear(slot, token.destination):
                self._cost += board.move_from_corridor(slot, token.destination)
                moves += 1
        return moves

    def settle(self):
        """Makes every forced move until none remain.
        A move straight into an amphipod's own room is never worse than
        waiting, so these moves do not branch the search. Returns the
        number of moves made.
        """
        total = 0
        while True:
            moves = self._try_settle()
            if moves == 0:
                return total
            total += moves

    def generate_successors(self):
        """Returns a state for every way of moving an amphipod out of a
        room into the hallway.
        """
        successors = []
        for column_index in range(Board.NUM_COLUMNS):
            if self._board.column_matches(column_index):
                # nothing in this room ever has to leave
                continue
            for slot in self._board.available_corridor_slots(column_index):
                successor = self.copy()
                successor._cost += successor._board.move_to_corridor(
                    column_index, slot
                )
                successors.append(successor)
        return successors

    def project_lower_bound(self):
        """Returns the spent energy plus an underestimate of the energy
        still needed, ignoring any amphipod blocking another.
        """
        bound = self._cost
        for position, token in zip(Board.SLOT_POSITIONS, self._board.corridor):
            if token is None:
                continue
            entrance = Board.COLUMN_POSITIONS[token.destination]
            bound += (1 + abs(position - entrance)) * token.cost
        for column_index, column in enumerate(self._board.columns):
            for token in column:
                if token.destination == column_index:
                    continue
                distance = abs(
                    Board.COLUMN_POSITIONS[column_index]
                    - Board.COLUMN_POSITIONS[token.destination]
                )
                bound += (2 + distance) * token.cost
        return bound


# =============================================================================


def branch_and_bound(board, on_improvement=None):
    """Performs a depth-first branch and bound search from the given
    board. Calls `on_improvement` with every better cost found.
    Returns the minimum cost, or None if the board cannot be sorted.
    """
    best = None
    # maps: board -> lowest cost it was reached with
    # holds every popped board until the search ends
    lowest_costs = {}
    stack = [SearchState(board.copy())]
    while len(stack) > 0:
        state = stack.pop()
        if best is not None and (
            state.cost >= best or state.project_lower_bound() >= best
        ):
            continue
        seen_cost = lowest_costs.get(state.board)
        if seen_cost is not None and seen_cost <= state.cost:
            continue
        lowest_costs[state.board] = state.cost

        settled = state.copy()
        settled.settle()
        if settled.is_settled():
            if best is None or settled.cost < best:
                best = settled.cost
                if on_improvement is not None:
                    on_improvement(best)
            continue
        stack.extend(settled.generate_successors())
    return best


class Game:
    """Defines a burrow to sort."""

    def __init__(self, lines):
        self._board = Board.parse(lines)
        self._solved = False
        self._cost = None

    def __str__(self):
        return str(self._board)

    def __repr__(self):
        return f"Game({self._board!r})"

    @property
    def board(self):
        return self._board

    @property
    def cost(self):
        if not self._solved:
            self.solve()
        return self._cost

    def solve(self, on_improvement=None):
        if self._solved:
            return self._cost
        cost = branch_and_bound(self._board, on_improvement)
        if cost is None:
            raise RuntimeError("Could not find a solution for the given burrow")
        self._cost = cost
        self._solved = True
        return cost


# =============================================================================


def main():
    lines = [line.rstrip("\n") for line in sys.stdin if line.strip() != ""]
    if len(lines) == 0:
        print("No burrow diagram given")
        return

    try:
        game = Game(lines)
    except ValueError as e:
        print(e)
        sys.exit(1)
    print("Start:")
    print(game)
    print()
    print("Solving...")
    try:
        cost = game.solve(lambda c: print(f"Found solution. Cost: {c}"))
    except RuntimeError as e:
        print(e)
        sys.exit(1)
    print("Minimum cost:", cost)


if __name__ == "__main__":
    main()
