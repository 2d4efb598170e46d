"""Static narrative content of case #99-042, "The Rainy Night Butcher"."""

from cold_case_mcp.models.archive import DirectoryNode, EncryptedNode, TextNode

CASE_ID = "#99-042"
CASE_TITLE = "The Rainy Night Butcher"

README = f"""
AUTHORIZED PERSONNEL ONLY
=========================
CASE NUMBER: {CASE_ID} "{CASE_TITLE}"
STATUS: COLD / UNSOLVED
LEAD DETECTIVE: J. Miller (deceased)

OPERATING INSTRUCTIONS:
- Type 'ls' to list the files here.
- Type 'cd [folder]' to enter a directory.
- Type 'open [file]' to read evidence (no extension needed).
- Type 'decrypt [file] [password]' to unlock an encrypted file.
- Type 'search [keyword]' to search the whole database for clues.
- Type 'ask [question]' to have the AI assistant analyse discovered clues.
"""

POLICE_REPORT = """
CASE REPORT #8921
DATE: November 4, 1999
SUSPECT: Arthur Vance (male, 45)
ADDRESS: 4200 Oak Street

Suspect detained for questioning in the disappearance of Sarah O'Neil.
Suspect refused to speak without counsel present, but kept muttering about
"the safe place" and claimed nobody would ever find it.

Personal effects: a receipt for a doll, dated July 14.
"""

WITNESS_STATEMENT = """
WITNESS STATEMENT: Maria Gonzalez (neighbour)

"Arthur is a very quiet man, very private. Last year he changed the lock on
the basement door three times. He always said he was building a playroom for
his daughter Maya. Poor child, she died years ago, but he talked about her as
if she were still alive."
"""

PHOTO_LOG = """
[IMAGE DATA CORRUPTED - TEXT DESCRIPTION ONLY]

Photo #1: Living room. Tidy.
Photo #2: Kitchen. Calendar on the wall, open at July 1995.
          The 14th is circled in red, with "Maya's day" written beside it.
Photo #3: Basement door. Heavy padlock attached.
"""

TRANSCRIPT_01 = """
DET. MILLER: Where is she, Arthur?
VANCE: She's safe. Safer than here.
DET. MILLER: We searched the house. It's empty.
VANCE: You don't know the code. You don't know me.
DET. MILLER: Give us the code to the basement padlock.
VANCE: It's just a date. The happiest day of my life. The day my little angel
       was born. But you'll never guess the year. Hottest summer on record... '95.

(END OF RECORDING)
"""

COORDINATES_PREVIEW = """
[ENCRYPTED FILE]
[ALGORITHM: AES-128]
[STATUS: LOCKED]

Enter the password to view the contents.
HINT: the password format is MMDDYY (month month day day year year).
"""

COORDINATES_SECRET = """
--- DECRYPTION SUCCESSFUL ---

FILE: coordinates.txt
CONTENTS:

"They think I'm mad. But I built the sanctuary.
LOCATION:
Old sewage treatment plant
Sector 7G, Tunnel 4.
Access code: 8821

She is waiting there. She is sleeping."

(CASE SOLVED. You have found the victim's location.)
"""

MILLER_DIARY = """
We have to let him go. Not enough evidence.
I know he did it. I know he has her hidden somewhere.
If only I could crack that file he left on the server.
He kept going on about his daughter's birthday.
I checked the records: Maya was born in July. Mid-July.
But I can't remember the exact date... maybe the photos hold a clue?
"""

BOOT_SEQUENCE: list[tuple[str, str]] = [
    ("system", "Connecting to L.A.P.D. archive server..."),
    ("system", "Connection established."),
    ("system", "User: guest detective (read-only access)"),
    ("info", "Welcome to the cold case database."),
    ("info", 'Type "help" for a list of available commands.'),
    ("info", " "),
]

SOLVED_BANNER = """
***********************************************
* Congratulations, detective. Case solved.    *
* Report filed: suspect's hideout confirmed.  *
***********************************************
"""


def build_case_archive() -> DirectoryNode:
    """Builds a fresh archive tree with every encrypted record locked."""
    return DirectoryNode.of(
        "",
        TextNode(name="README.txt", created_date="1999-01-01", body=README),
        DirectoryNode.of(
            "evidence",
            TextNode(name="police_report.txt", created_date="1999-11-04", body=POLICE_REPORT),
            TextNode(name="witness_stmt.txt", created_date="1999-11-05", body=WITNESS_STATEMENT),
            TextNode(name="photo_log.txt", created_date="1999-11-06", body=PHOTO_LOG),
        ),
        DirectoryNode.of(
            "interviews",
            TextNode(name="transcript_01.txt", created_date="1999-11-04", body=TRANSCRIPT_01),
        ),
        DirectoryNode.of(
            "encrypted",
            EncryptedNode(
                name="coordinates.enc",
                created_date="1999-11-07",
                locked_preview_text=COORDINATES_PREVIEW,
                # July 14, '95
                password="071495",
                secret_body=COORDINATES_SECRET,
                is_win_condition=True,
            ),
        ),
        DirectoryNode.of(
            "notes",
            TextNode(name="miller_diary.txt", created_date="2000-02-01", body=MILLER_DIARY),
        ),
    )
