"""Unit tests for the components shared by the sync and aio walkers.

Covers configuration, records, errors, the cancellation token, the dedup
guard, child classification and the error policies.
"""

import errno
import os
import tempfile
import threading
import unittest

from fastwalklib._common import (
    CancellationToken,
    ChildClassifier,
    ChildInfo,
    CollectErrorsPolicy,
    ContinueOnErrorsPolicy,
    DedupGuard,
    DedupPolicy,
    DirectoryUnavailableError,
    Entry,
    FrontierOrder,
    InvalidArgumentError,
    NullGuard,
    ResultFilter,
    UnavailableReason,
    WalkConfig,
    WalkStats,
    WorkItem,
    resolve_config,
    validate_root,
)


class TestWalkConfig(unittest.TestCase):
    """Test WalkConfig defaults, constructors and predicates."""

    def test_defaults(self):
        config = WalkConfig()
        self.assertEqual(config.pattern, "*")
        self.assertEqual(config.result_filter, ResultFilter.FILES)
        self.assertEqual(config.max_depth, -1)
        self.assertEqual(config.frontier_order, FrontierOrder.LIFO)
        self.assertEqual(config.dedup, DedupPolicy.DIRECTORIES)
        self.assertIn('Thumbs.db', config.ignored_names)
        self.assertFalse(config.is_bounded)
        self.assertGreaterEqual(config.effective_parallelism, 1)
        self.assertEqual(config.validate(), [])

    def test_convenience_constructors(self):
        self.assertEqual(WalkConfig.files_only("*.py").result_filter, ResultFilter.FILES)
        self.assertEqual(WalkConfig.files_only("*.py").pattern, "*.py")
        self.assertEqual(WalkConfig.directories_only().result_filter, ResultFilter.DIRECTORIES)

        shallow = WalkConfig.shallow_scan()
        self.assertEqual(shallow.max_depth, 1)
        self.assertEqual(shallow.result_filter, ResultFilter.BOTH)

    def test_depth_predicates(self):
        """Depth 1 lists only the root; below 1 is unbounded."""
        bounded = WalkConfig(max_depth=1)
        self.assertTrue(bounded.should_expand(0))
        self.assertFalse(bounded.should_expand(1))
        self.assertFalse(bounded.should_enqueue(1))

        two = WalkConfig(max_depth=2)
        self.assertTrue(two.should_enqueue(1))
        self.assertFalse(two.should_enqueue(2))

        for unbounded in (0, -1, -5):
            config = WalkConfig(max_depth=unbounded)
            self.assertFalse(config.is_bounded)
            self.assertTrue(config.should_expand(1000))

    def test_wants(self):
        self.assertTrue(WalkConfig().wants(False))
        self.assertFalse(WalkConfig().wants(True))
        both = WalkConfig(result_filter=ResultFilter.BOTH)
        self.assertTrue(both.wants(True) and both.wants(False))

    def test_validate_reports_every_problem(self):
        config = WalkConfig(pattern="", parallelism=0, channel_capacity=-1)
        errors = config.validate()
        self.assertEqual(len(errors), 3)

    def test_validate_rejects_non_integers(self):
        errors = WalkConfig(max_depth='2', parallelism='4', channel_capacity=None).validate()
        self.assertEqual(errors, [
            "max_depth must be an integer",
            "parallelism must be an integer",
            "channel_capacity must be an integer",
        ])
        self.assertEqual(len(WalkConfig(max_depth=True, poll_interval='fast').validate()), 2)


class TestResolveConfig(unittest.TestCase):
    """Test merging entry-point arguments into a config."""

    def test_none_keeps_config_values(self):
        base = WalkConfig(pattern="*.log", max_depth=3, parallelism=2)
        resolved = resolve_config(base)
        self.assertEqual(resolved, base)
        self.assertIsNot(resolved, base)

    def test_explicit_arguments_override(self):
        base = WalkConfig(pattern="*.log", max_depth=3)
        resolved = resolve_config(base, pattern="*.txt", result_filter="both", max_depth=1)
        self.assertEqual(resolved.pattern, "*.txt")
        self.assertEqual(resolved.result_filter, ResultFilter.BOTH)
        self.assertEqual(resolved.max_depth, 1)
        self.assertEqual(base.pattern, "*.log")

    def test_invalid_arguments_raise(self):
        with self.assertRaises(InvalidArgumentError):
            resolve_config(parallelism=0)
        with self.assertRaises(InvalidArgumentError):
            resolve_config(pattern="")
        with self.assertRaises(InvalidArgumentError):
            resolve_config(result_filter="everything")
        with self.assertRaises(InvalidArgumentError):
            resolve_config(max_depth='2')

    def test_invalid_argument_is_value_error(self):
        with self.assertRaises(ValueError):
            resolve_config(parallelism=-3)

    def test_validate_root(self):
        self.assertEqual(validate_root("/tmp"), "/tmp")
        for bad in ("", "   ", None, 42):
            with self.assertRaises(InvalidArgumentError):
                validate_root(bad)


class TestRecords(unittest.TestCase):
    """Test Entry and ChildInfo."""

    def test_entry_from_file_child(self):
        child = ChildInfo('report.csv', False, 120, 0o644)
        entry = Entry.from_child(child, '/data/report.csv', 1)
        self.assertEqual(entry.name, 'report.csv')
        self.assertEqual(entry.size, 120)
        self.assertTrue(entry.is_file)
        self.assertEqual(entry.extension, '.csv')
        self.assertEqual(entry.directory_name, '/data')
        self.assertEqual(str(entry), '/data/report.csv')

    def test_directory_size_is_zero(self):
        child = ChildInfo('sub', True, 4096)
        entry = Entry.from_child(child, '/data/sub', 1)
        self.assertEqual(entry.size, 0)
        self.assertEqual(entry.extension, '')

    def test_exists_is_checked_on_access(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'gone.txt')
            with open(path, 'w') as handle:
                handle.write('x')
            entry = Entry.from_child(ChildInfo('gone.txt', False, 1), path, 1)
            self.assertTrue(entry.exists)
            os.remove(path)
            self.assertFalse(entry.exists)

    def test_entry_is_immutable(self):
        entry = Entry.from_child(ChildInfo('a', False), '/a', 1)
        with self.assertRaises(AttributeError):
            entry.size = 10

    def test_to_dict(self):
        entry = Entry.from_child(ChildInfo('sub', True), '/r/sub', 1)
        data = entry.to_dict()
        self.assertEqual(data['type'], 'directory')
        self.assertEqual(data['full_path'], '/r/sub')
        self.assertEqual(data['depth'], 1)


class TestDirectoryUnavailableError(unittest.TestCase):
    """Test OSError classification."""

    def test_not_found(self):
        error = DirectoryUnavailableError.from_os_error('/x', FileNotFoundError('gone'))
        self.assertEqual(error.reason, UnavailableReason.NOT_FOUND)
        self.assertIsInstance(error.__cause__, FileNotFoundError)

    def test_not_a_directory(self):
        error = DirectoryUnavailableError.from_os_error('/x', NotADirectoryError('file'))
        self.assertEqual(error.reason, UnavailableReason.NOT_FOUND)

    def test_access_denied(self):
        error = DirectoryUnavailableError.from_os_error('/x', PermissionError('no'))
        self.assertEqual(error.reason, UnavailableReason.ACCESS_DENIED)

        error = DirectoryUnavailableError.from_os_error('/x', OSError(errno.EPERM, 'no'))
        self.assertEqual(error.reason, UnavailableReason.ACCESS_DENIED)

    def test_other(self):
        error = DirectoryUnavailableError.from_os_error('/x', OSError(errno.EIO, 'disk'))
        self.assertEqual(error.reason, UnavailableReason.OTHER)
        self.assertEqual(error.path, '/x')


class TestCancellationToken(unittest.TestCase):
    """Test the cancellation token."""

    def test_cancel_runs_callbacks_once(self):
        token = CancellationToken()
        calls = []
        token.register(lambda: calls.append('a'))

        token.cancel()
        token.cancel()

        self.assertTrue(token.is_cancelled)
        self.assertEqual(calls, ['a'])

    def test_register_after_cancel_runs_immediately(self):
        token = CancellationToken()
        token.cancel()
        calls = []
        token.register(lambda: calls.append('late'))
        self.assertEqual(calls, ['late'])

    def test_unregister(self):
        token = CancellationToken()
        calls = []
        callback = lambda: calls.append('x')  # noqa: E731
        token.register(callback)
        token.unregister(callback)
        token.unregister(callback)
        token.cancel()
        self.assertEqual(calls, [])

    def test_linked_token_follows_parent_only(self):
        parent = CancellationToken()
        child = CancellationToken.linked(parent)

        child.cancel()
        self.assertFalse(parent.is_cancelled)

        other = CancellationToken.linked(parent)
        parent.cancel()
        self.assertTrue(other.is_cancelled)

    def test_cancel_after(self):
        token = CancellationToken()
        token.cancel_after(0.05)
        self.assertTrue(token.wait(5.0))

    def test_cancel_from_other_thread(self):
        token = CancellationToken()
        thread = threading.Thread(target=token.cancel)
        thread.start()
        thread.join()
        self.assertTrue(token.wait(0))


class TestDedupGuard(unittest.TestCase):
    """Test the dedup guard."""

    def test_first_claim_wins(self):
        guard = DedupGuard()
        self.assertTrue(guard.claim('/r/sub'))
        self.assertFalse(guard.claim('/r/sub'))
        self.assertIn('/r/sub', guard)
        self.assertEqual(len(guard), 1)

    def test_concurrent_claims(self):
        guard = DedupGuard()
        winners = []
        lock = threading.Lock()
        barrier = threading.Barrier(8)

        def claim():
            barrier.wait()
            if guard.claim('/shared'):
                with lock:
                    winners.append(threading.current_thread().name)

        threads = [threading.Thread(target=claim) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(winners), 1)

    def test_null_guard_never_refuses(self):
        guard = NullGuard()
        self.assertTrue(guard.claim('/r'))
        self.assertTrue(guard.claim('/r'))
        self.assertEqual(len(guard), 0)


class TestChildClassifier(unittest.TestCase):
    """Test routing of lister children."""

    def classifier(self, **kwargs):
        return ChildClassifier(WalkConfig(**kwargs), lambda parent, name: f"{parent}/{name}")

    def test_file_matching_pattern(self):
        dispatch = self.classifier(pattern="*.txt").classify(
            WorkItem('/r', 0), ChildInfo('a.txt', False, 5))
        self.assertEqual(dispatch.entry.full_path, '/r/a.txt')
        self.assertEqual(dispatch.entry.depth, 1)
        self.assertIsNone(dispatch.work_item)

    def test_file_not_matching_pattern(self):
        dispatch = self.classifier(pattern="*.txt").classify(
            WorkItem('/r', 0), ChildInfo('a.log', False))
        self.assertIsNone(dispatch.entry)
        self.assertIsNone(dispatch.work_item)

    def test_directory_descended_even_when_not_reported(self):
        dispatch = self.classifier(pattern="*.txt").classify(
            WorkItem('/r', 0), ChildInfo('sub', True))
        self.assertIsNone(dispatch.entry)
        self.assertEqual(dispatch.work_item, WorkItem('/r/sub', 1))

    def test_directory_reported_when_requested(self):
        dispatch = self.classifier(result_filter=ResultFilter.BOTH).classify(
            WorkItem('/r/sub', 1), ChildInfo('deep', True))
        self.assertTrue(dispatch.entry.is_directory)
        self.assertEqual(dispatch.entry.depth, 2)

    def test_depth_bound_stops_enqueue(self):
        dispatch = self.classifier(max_depth=1, result_filter=ResultFilter.BOTH).classify(
            WorkItem('/r', 0), ChildInfo('sub', True))
        self.assertIsNotNone(dispatch.entry)
        self.assertIsNone(dispatch.work_item)

    def test_ignored_and_pseudo_entries(self):
        classifier = self.classifier(result_filter=ResultFilter.BOTH)
        for name in ('.', '..', 'Thumbs.db', ''):
            dispatch = classifier.classify(WorkItem('/r', 0), ChildInfo(name, name != 'Thumbs.db'))
            self.assertIsNone(dispatch.entry, name)
            self.assertIsNone(dispatch.work_item, name)

    def test_lister_full_path_is_used(self):
        dispatch = self.classifier().classify(
            WorkItem('/r', 0), ChildInfo('a.txt', False, full_path='/elsewhere/a.txt'))
        self.assertEqual(dispatch.entry.full_path, '/elsewhere/a.txt')

    def test_star_matches_names_without_dot(self):
        self.assertTrue(self.classifier().matches('Makefile'))
        self.assertFalse(self.classifier(pattern="*.*").matches('Makefile'))


class TestErrorPolicies(unittest.TestCase):
    """Test error policy bookkeeping."""

    def test_continue_on_errors_records_and_logs(self):
        policy = ContinueOnErrorsPolicy(verbose=True)
        error = DirectoryUnavailableError('/r/locked', UnavailableReason.ACCESS_DENIED)

        with self.assertLogs('fastwalklib._common.error_policies', level='WARNING') as logs:
            policy.handle(error)

        self.assertIn('/r/locked', logs.output[0])
        self.assertEqual(policy.skipped_paths, ['/r/locked'])

    def test_quiet_policy_logs_at_debug(self):
        policy = ContinueOnErrorsPolicy(verbose=False)
        with self.assertLogs('fastwalklib._common.error_policies', level='DEBUG') as logs:
            policy.handle(DirectoryUnavailableError('/r/gone', UnavailableReason.NOT_FOUND))
        self.assertTrue(logs.records[0].levelname == 'DEBUG')

    def test_statistics(self):
        policy = CollectErrorsPolicy()
        policy.handle(DirectoryUnavailableError('/a', UnavailableReason.NOT_FOUND))
        policy.handle(DirectoryUnavailableError('/b', UnavailableReason.ACCESS_DENIED))
        policy.handle(DirectoryUnavailableError.from_os_error('/c', OSError(errno.EIO, 'io')))

        stats = policy.get_statistics()
        self.assertEqual(stats['total_errors'], 3)
        self.assertEqual(stats['not_found'], 1)
        self.assertEqual(stats['access_denied'], 1)
        self.assertEqual(stats['other'], 1)
        self.assertEqual(stats['errors'][2]['error_type'], 'OSError')


class TestWalkStats(unittest.TestCase):
    """Test session counters."""

    def test_increment_and_snapshot(self):
        stats = WalkStats()
        stats.increment('directories_listed')
        stats.increment('entries_emitted', 3)
        self.assertEqual(stats.directories_listed, 1)
        self.assertEqual(stats.snapshot()['entries_emitted'], 3)

    def test_unknown_counter(self):
        with self.assertRaises(AttributeError):
            WalkStats().not_a_counter


if __name__ == '__main__':
    unittest.main()
