"""Exceptions for use in Swiss Pairing"""

# Gambit Pairing
# Copyright (C) 2025  Gambit Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from enum import Enum


class ErrorKind(Enum):
    """What a caller should do about an error.

    NO_VALID_PAIRING means the round is unsatisfiable with the given input,
    UNAPPLICABLE_FEATURE and CONFIGURATION mean the caller asked for
    something the selected system cannot do, INTERNAL is a programming error.
    """

    NO_VALID_PAIRING = "no_valid_pairing"
    UNAPPLICABLE_FEATURE = "unapplicable_feature"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


# ========== Base Application Exception ==========


class SwissPairingException(Exception):
    """Base exception for all Swiss Pairing errors.

    All custom exceptions in the package inherit from this class.
    Every class carries an ``ErrorKind`` so callers can branch on the kind
    of failure without inspecting the class hierarchy.
    """

    kind = ErrorKind.INTERNAL


# ========== Pairing Exceptions ==========


class PairingException(SwissPairingException):
    """Base exception for pairing-related errors."""

    pass


class NoValidPairingException(PairingException):
    """Raised when no pairing satisfies the requirements imposed by the system."""

    kind = ErrorKind.NO_VALID_PAIRING

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.explanation = message


class InvalidPairingException(PairingException):
    """Raised when a pairing is malformed (e.g. a player paired with itself)."""

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(SwissPairingException):
    """Base exception for configuration errors."""

    kind = ErrorKind.CONFIGURATION


class UnapplicableFeatureException(ConfigurationException):
    """Raised when the selected Swiss system does not support a requested feature,
    for example a default acceleration system.
    """

    kind = ErrorKind.UNAPPLICABLE_FEATURE


class InvalidConfigurationException(ConfigurationException):
    """Raised when configuration data is invalid or unknown."""

    pass


# ========== Tournament Exceptions ==========


class TournamentException(SwissPairingException):
    """Base exception for tournament-related errors."""

    pass


class PlayerNotFoundException(TournamentException):
    """Raised when a player index does not refer to a player of the tournament."""

    pass


class InvalidResultException(TournamentException):
    """Raised when a result cannot be recorded (e.g. a player plays itself)."""

    pass
