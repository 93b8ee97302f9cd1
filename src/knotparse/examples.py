"""
Example story used by the demo script and the tests.

Exercises every construct of the script language: declarations,
knots and stitches, nested choices and gathers, conditional choices,
inline conditionals, sequences, expressions, labels, tags and
assignments.
"""
from knotparse.model import Document
from knotparse.parser import parse_string


EXAMPLE_STORY = """\
INCLUDE common/characters.ink
LIST Mood = calm, (curious), angry
CONST MAX_COINS = 10
VAR coins = 3
VAR name = "Traveller"

// The story starts at the harbour.
-> harbour

=== harbour ===
The ship creaks. # mood: calm
{coins > 0: You count your coins.|Your purse is empty.}
* [Talk to the captain] "Captain!" you call. -> captain
* {coins >= 3} [Buy a map]
    ~ coins -= 3
    You buy a map from {name}.
* * [Thank the seller] "Thanks." 
* Leave -> DONE
- (wait) The gulls {&scream|circle|dive}.

= captain
~ temp greeted = true
"Ahoy, {name}!" the captain {~grins|nods}. #speaker: captain
+ [Nod] -> harbour.wait
+ -> DONE

=== ending ===
TODO: write the ending
{!The end.|The end, again.|}
"""


def build_example_document() -> Document:
    return parse_string(EXAMPLE_STORY)
