#!/usr/bin/env python3
"""
Demo of strictread: reading from a source that returns data and EOF together
"""

import io

from strictread import EOF, Basic, StreamSource, StrictReader, iter_chunks, read_into

print("=" * 60)
print("strictread Demo")
print("=" * 60)

# Basic can return n > 0 and err != None in the same read
print("\n1. The read loop we want, on a loose source")
print("-" * 60)

b = Basic("Hello, World!")
p = bytearray(10)  # smaller than the content

while True:
    n, err = b.read(p)
    if err is not None:
        print(f"whoops, lost: {bytes(p[:n])}")
        break
    print(bytes(p[:n]))


print("\n2. The read loop we have to write instead")
print("-" * 60)

b = Basic("Hello, World!")
while True:
    n, err = b.read(p)
    # look at the data before the error
    if n > 0:
        print(bytes(p[:n]))
    if err is not None:
        break


print("\n3. The read loop we want, through StrictReader")
print("-" * 60)

r = StrictReader(Basic("Hello, World!"))
while True:
    n, err = r.read(p)
    if err is not None:
        print(f"stopped on {err}")
        break
    print(bytes(p[:n]))


print("\n4. read_into takes care of indices")
print("-" * 60)

r = StrictReader(Basic("Hello, World!"))
p = bytearray(10)
while True:
    p, err = read_into(r, p)
    if err is not None:
        break
    print(bytes(p))


print("\n5. Drain before touching the wrapped source")
print("-" * 60)

src = StreamSource(io.BytesIO(b"Hello, World!"))
r = StrictReader(src)
p, err = read_into(r, bytearray(10))
print(bytes(p))

# a pending error would be lost (or misreported) by the seek below
err = r.drain_error()
if err is not None and err is not EOF:
    raise err
src.seek(-3, io.SEEK_CUR)

p, err = read_into(r, p)
print(bytes(p))


print("\n6. iter_chunks")
print("-" * 60)

print(list(iter_chunks(Basic("Hello, World!"), buffer_size=4)))

print("\n" + "=" * 60)
