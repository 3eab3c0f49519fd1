import unittest

from strictread import EOF, Basic, Source, StrictReader, read_into


class RecordingSource(Source):
    """Serves fixed chunk sizes and remembers the buffer length it was offered."""

    def __init__(self, sizes, err=None):
        self._sizes = list(sizes)
        self._err = err
        self.offered = []

    def read(self, buffer):
        self.offered.append(len(buffer))
        if not self._sizes:
            return 0, self._err or EOF
        n = min(self._sizes.pop(0), len(buffer))
        buffer[:n] = b'z' * n
        return n, None


class ReadIntoTests(unittest.TestCase):

    def test_read_loop(self):
        r = StrictReader(Basic('Hello, World!'))
        p = bytearray(10)
        chunks = []
        while True:
            p, err = read_into(r, p)
            if err is not None:
                break
            chunks.append(bytes(p))
        self.assertEqual(chunks, [b'Hello, Wor', b'ld!'])
        self.assertIs(err, EOF)

    def test_length_matches_count(self):
        src = RecordingSource([3, 0, 7, 10])
        p = bytearray(10)
        for expected in (3, 0, 7, 10):
            p, err = read_into(src, p)
            self.assertIsNone(err)
            self.assertEqual(len(p), expected)

    def test_result_grows_back_to_capacity(self):
        src = RecordingSource([2, 5])
        p = bytearray(8)
        p, _ = read_into(src, p)
        self.assertEqual(len(p), 2)
        p, _ = read_into(src, p)
        self.assertEqual(len(p), 5)
        self.assertEqual(src.offered, [8, 8])

    def test_view_shares_caller_buffer(self):
        buf = bytearray(4)
        view, err = read_into(Basic(b'abcd'), buf)
        self.assertIsNone(err)
        self.assertIs(view.obj, buf)
        self.assertEqual(bytes(buf), b'abcd')

    def test_data_and_error_from_loose_source(self):
        view, err = read_into(Basic(b'abc'), bytearray(8))
        self.assertEqual(bytes(view), b'abc')
        self.assertIs(err, EOF)

    def test_error_gives_empty_view(self):
        boom = IOError('boom')
        view, err = read_into(RecordingSource([], err=boom), bytearray(8))
        self.assertEqual(len(view), 0)
        self.assertIs(err, boom)

    def test_window_keeps_bytes_before_it(self):
        buf = bytearray(b'HEADER\0\0\0\0')
        view, err = read_into(Basic(b'xy'), memoryview(buf)[6:])
        self.assertIs(err, EOF)
        self.assertEqual(bytes(view), b'xy')
        self.assertEqual(bytes(buf), b'HEADERxy\0\0')

    def test_window_grows_to_end_of_buffer_only(self):
        src = RecordingSource([2, 4])
        buf = bytearray(10)
        p, _ = read_into(src, memoryview(buf)[4:7])
        self.assertEqual(len(p), 2)
        p, _ = read_into(src, p)
        self.assertEqual(len(p), 4)
        self.assertEqual(src.offered, [6, 6])
        self.assertEqual(bytes(buf[:4]), b'\0\0\0\0')

    def test_prefix_view_grows_to_whole_buffer(self):
        src = RecordingSource([1])
        read_into(src, memoryview(bytearray(8))[:3])
        self.assertEqual(src.offered, [8])

    def test_none_buffer(self):
        src = RecordingSource([4])
        view, err = read_into(src, None)
        self.assertIsNone(view)
        self.assertIsNone(err)
        self.assertEqual(src.offered, [0])

    def test_none_buffer_passes_error(self):
        view, err = read_into(Basic(b''), None)
        self.assertIsNone(view)
        self.assertIs(err, EOF)

    def test_empty_buffer(self):
        b = Basic(b'abc')
        view, err = read_into(b, bytearray())
        self.assertEqual(len(view), 0)
        self.assertIsNone(err)
        self.assertEqual(len(b), 3)


if __name__ == '__main__':
    unittest.main(verbosity=2)
