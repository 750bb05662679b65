"""
Learnopoly — Social Learning Ledger Smart Contract
====================================================

Profiles, courses, enrollments, posts, likes and connections on Algorand.

Architecture:
  • Every record lives in a Box; global state only holds the two id counters.
  • Course and post ids are dense and sequential from 0.
  • Enrollments and connections are per-account ARC-4 dynamic arrays that
    only ever grow.
  • The application creator is the administrator: the only account allowed
    to call increase_reputation.

Box layout:
  ┌────────┬──────────────────┬────────────────────────────────────┐
  │ prefix │ key              │ value                              │
  ├────────┼──────────────────┼────────────────────────────────────┤
  │ "p"    │ 32-byte address  │ Profile                            │
  │ "c"    │ uint64 course id │ Course                             │
  │ "t"    │ uint64 post id   │ Post                               │
  │ "e"    │ 32-byte address  │ uint64[]  (course ids, in order)   │
  │ "n"    │ 32-byte address  │ address[] (connections, in order)  │
  └────────┴──────────────────┴────────────────────────────────────┘

A failed assert rejects the whole transaction, so no call ever leaves a
partial write behind.
"""

from algopy import ARC4Contract, Account, BoxMap, Global, Txn, UInt64, arc4, subroutine


# ---------------------------------------------------------------------------
# ARC-4 Structs
# ---------------------------------------------------------------------------
class Profile(arc4.Struct, kw_only=True):
    """A learner profile.

    ``exists`` is False only for placeholder records created when
    reputation is granted to an account that has no profile yet.
    """

    username: arc4.String
    bio: arc4.String
    skills: arc4.DynamicArray[arc4.String]
    reputation: arc4.UInt64
    exists: arc4.Bool


class Course(arc4.Struct, kw_only=True):
    title: arc4.String
    description: arc4.String
    creator: arc4.Address
    enrollment_count: arc4.UInt64
    exists: arc4.Bool


class Post(arc4.Struct, kw_only=True):
    author: arc4.Address
    content: arc4.String
    likes: arc4.UInt64
    exists: arc4.Bool


# ---------------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------------
class Learnopoly(ARC4Contract):
    """Learnopoly social learning ledger.

    ABI Methods
    -----------
    create_profile(username, bio, skills)
    update_profile(username, bio, skills)
    increase_reputation(target, amount)         administrator only
    create_course(title, description) → uint64
    enroll_in_course(course_id)
    create_post(content) → uint64
    like_post(post_id)
    add_connection(other)
    get_profile / get_course / get_post / get_user_enrollments /
    get_user_connections / get_course_count / get_post_count   (read-only)
    """

    def __init__(self) -> None:
        self.course_count = UInt64(0)
        self.post_count = UInt64(0)
        self.profiles = BoxMap(Account, Profile, key_prefix=b"p")
        self.courses = BoxMap(UInt64, Course, key_prefix=b"c")
        self.posts = BoxMap(UInt64, Post, key_prefix=b"t")
        self.enrollments = BoxMap(Account, arc4.DynamicArray[arc4.UInt64], key_prefix=b"e")
        self.connections = BoxMap(Account, arc4.DynamicArray[arc4.Address], key_prefix=b"n")

    # ── Profiles ──────────────────────────────────────────────────────
    @arc4.abimethod()
    def create_profile(
        self,
        username: arc4.String,
        bio: arc4.String,
        skills: arc4.DynamicArray[arc4.String],
    ) -> None:
        assert not self._has_profile(Txn.sender), "Profile already exists"

        self.profiles[Txn.sender] = Profile(
            username=username,
            bio=bio,
            skills=skills.copy(),
            reputation=arc4.UInt64(0),
            exists=arc4.Bool(True),
        )

    @arc4.abimethod()
    def update_profile(
        self,
        username: arc4.String,
        bio: arc4.String,
        skills: arc4.DynamicArray[arc4.String],
    ) -> None:
        assert self._has_profile(Txn.sender), "Profile does not exist"

        profile = self.profiles[Txn.sender].copy()
        profile.username = username
        profile.bio = bio
        profile.skills = skills.copy()
        self.profiles[Txn.sender] = profile.copy()

    @arc4.abimethod()
    def increase_reputation(self, target: arc4.Address, amount: arc4.UInt64) -> None:
        assert Txn.sender == Global.creator_address, "Only the administrator can increase reputation"

        account = target.native
        if account in self.profiles:
            profile = self.profiles[account].copy()
        else:
            profile = _placeholder_profile()
        profile.reputation = arc4.UInt64(profile.reputation.native + amount.native)
        self.profiles[account] = profile.copy()

    # ── Courses ───────────────────────────────────────────────────────
    @arc4.abimethod()
    def create_course(self, title: arc4.String, description: arc4.String) -> arc4.UInt64:
        course_id = self.course_count
        self.courses[course_id] = Course(
            title=title,
            description=description,
            creator=arc4.Address(Txn.sender),
            enrollment_count=arc4.UInt64(0),
            exists=arc4.Bool(True),
        )
        self.course_count = course_id + 1
        return arc4.UInt64(course_id)

    @arc4.abimethod()
    def enroll_in_course(self, course_id: arc4.UInt64) -> None:
        assert course_id.native in self.courses, "Course does not exist"

        course = self.courses[course_id.native].copy()
        course.enrollment_count = arc4.UInt64(course.enrollment_count.native + 1)
        self.courses[course_id.native] = course.copy()

        if Txn.sender in self.enrollments:
            course_ids = self.enrollments[Txn.sender].copy()
        else:
            course_ids = arc4.DynamicArray[arc4.UInt64]()
        course_ids.append(course_id)
        self.enrollments[Txn.sender] = course_ids.copy()

    # ── Social feed ───────────────────────────────────────────────────
    @arc4.abimethod()
    def create_post(self, content: arc4.String) -> arc4.UInt64:
        post_id = self.post_count
        self.posts[post_id] = Post(
            author=arc4.Address(Txn.sender),
            content=content,
            likes=arc4.UInt64(0),
            exists=arc4.Bool(True),
        )
        self.post_count = post_id + 1
        return arc4.UInt64(post_id)

    @arc4.abimethod()
    def like_post(self, post_id: arc4.UInt64) -> None:
        assert post_id.native in self.posts, "Post does not exist"

        post = self.posts[post_id.native].copy()
        post.likes = arc4.UInt64(post.likes.native + 1)
        self.posts[post_id.native] = post.copy()

    @arc4.abimethod()
    def add_connection(self, other: arc4.Address) -> None:
        assert other.native != Txn.sender, "Cannot connect with yourself"

        self._append_connection(Txn.sender, other)
        self._append_connection(other.native, arc4.Address(Txn.sender))

    # ── Read ──────────────────────────────────────────────────────────
    @arc4.abimethod(readonly=True)
    def get_profile(self, wallet: arc4.Address) -> Profile:
        return self.profiles.get(wallet.native, default=_placeholder_profile())

    @arc4.abimethod(readonly=True)
    def get_course(self, course_id: arc4.UInt64) -> Course:
        return self.courses.get(
            course_id.native,
            default=Course(
                title=arc4.String(""),
                description=arc4.String(""),
                creator=arc4.Address(),
                enrollment_count=arc4.UInt64(0),
                exists=arc4.Bool(False),
            ),
        )

    @arc4.abimethod(readonly=True)
    def get_post(self, post_id: arc4.UInt64) -> Post:
        return self.posts.get(
            post_id.native,
            default=Post(
                author=arc4.Address(),
                content=arc4.String(""),
                likes=arc4.UInt64(0),
                exists=arc4.Bool(False),
            ),
        )

    @arc4.abimethod(readonly=True)
    def get_user_enrollments(self, wallet: arc4.Address) -> arc4.DynamicArray[arc4.UInt64]:
        return self.enrollments.get(wallet.native, default=arc4.DynamicArray[arc4.UInt64]())

    @arc4.abimethod(readonly=True)
    def get_user_connections(self, wallet: arc4.Address) -> arc4.DynamicArray[arc4.Address]:
        return self.connections.get(wallet.native, default=arc4.DynamicArray[arc4.Address]())

    @arc4.abimethod(readonly=True)
    def get_course_count(self) -> UInt64:
        return self.course_count

    @arc4.abimethod(readonly=True)
    def get_post_count(self) -> UInt64:
        return self.post_count

    # ── Helpers ───────────────────────────────────────────────────────
    @subroutine
    def _has_profile(self, account: Account) -> bool:
        if account in self.profiles:
            return self.profiles[account].exists.native
        return False

    @subroutine
    def _append_connection(self, account: Account, peer: arc4.Address) -> None:
        if account in self.connections:
            peers = self.connections[account].copy()
        else:
            peers = arc4.DynamicArray[arc4.Address]()
        peers.append(peer)
        self.connections[account] = peers.copy()


@subroutine
def _placeholder_profile() -> Profile:
    return Profile(
        username=arc4.String(""),
        bio=arc4.String(""),
        skills=arc4.DynamicArray[arc4.String](),
        reputation=arc4.UInt64(0),
        exists=arc4.Bool(False),
    )
