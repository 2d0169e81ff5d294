## scalar and vector primitives for sketchmesh
## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## Copyright (c) 2026 sketchmesh contributors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""scalar and vector primitives for **sketchmesh**

vectors
=======

vectors are lists of four numbers, i.e. ``[x,y,z,w]``.  The ``w``
coordinate is a homogeneous normalization factor: points lie in the
``w=1`` hyperplane and direction vectors in the ``w=0`` hyperplane, so
that a single 4x4 matrix (see ``sketchmesh.xform``) can apply both
rotations and translations.  ``[x,y,z,w]`` is the same 3D coordinate as
``[x/w,y/w,z/w,1]``.

2D device coordinates, such as the samples of a pointer trace, are
ordinary points with ``z=0``: ::

   sample = point(-0.25, 0.5)
   ground = point(5.0, 0.0, -3.0)

Most functions here ignore the ``w`` component and operate as though
``w=1``.  The functions with a ``4`` suffix operate on all four
components.

"""

from math import *

## constants
epsilon=0.000005

## operations on scalars
## -----------------------

## booleans are ints in python, but True and False are not numbers
## for our purposes
def isgoodnum(n):
    """ determine if an argument is actually a scalar number, and not boolean
    """
    return (not isinstance(n,bool)) and isinstance(n,(int,float))

def close(a,b):
    """ are two scalars the same within epsilon
    """
    return abs(a-b) < epsilon

def lerp(a,b,u):
    """ linear interpolation between scalars ``a`` and ``b``"""
    return a + u*(b-a)

## operations on vectors
## ------------------------

def vect(a=False,b=False,c=False,d=False):
    """Convenience function for making a homogeneous coordinates 4 vector
from practically anything
    """
    r = [0,0,0,1]
    if isgoodnum(a):
        r[0]=a
        if isgoodnum(b):
            r[1]=b
            if isgoodnum(c):
                r[2]=c
                if isgoodnum(d):
                    r[3]=d
    elif isinstance(a,(tuple,list)):
        for i in range(min(4,len(a))):
            x=a[i]
            if isgoodnum(x):
                r[i]=x
    return r

def isvect(x):
    """
    check to see if argument is a proper vector for our purposes
    """
    return isinstance(x,list) and len(x) == 4 and isgoodnum(x[0]) and isgoodnum(x[1]) and isgoodnum(x[2]) and isgoodnum(x[3])

def direction(a=False,b=False,c=False):
    """make a direction vector, which lies in the w=0 hyperplane"""
    r = vect(a,b,c)
    r[3] = 0
    return r

## R^3 -> R^3 functions: ignore w component
## ------------------------------------------------
def add(a,b):
    """ 3 vector, `a + b`"""
    return [a[0]+b[0],a[1]+b[1],a[2]+b[2],1.0]

def sub(a,b):
    """ 3 vector, `a - b`"""
    return [a[0]-b[0],a[1]-b[1],a[2]-b[2],1.0]

def scale3(a,c):
    """ 3 vector, vector ''a'' times scalar ``c``, `a * c`"""
    return [a[0]*c,a[1]*c,a[2]*c,1.0]

def cross(a,b):
    """Compute the cross generalized product of a x b, assuming that both
    fall into the w=1 hyperplane

    """
    return [ a[1]*b[2] - a[2]*b[1],
             a[2]*b[0] - a[0]*b[2],
             a[0]*b[1] - a[1]*b[0],
             1.0 ]

def normalize(a):
    """ return the unit 3 vector pointing along ``a``"""
    m = mag(a)
    if m < epsilon:
        raise ValueError('cannot normalize zero-length vector: {}'.format(vstr(a)))
    return scale3(a,1.0/m)

def lerp3(a,b,u):
    """ 3 vector linear interpolation, `a + u*(b-a)`"""
    return [lerp(a[0],b[0],u),lerp(a[1],b[1],u),lerp(a[2],b[2],u),1.0]

## NOTE: this function assumes that a lies in the x,y plane.  If this
## is not the case, the results are bogus.
def rotate90XY(a):
    """rotate vector ``a``, which lies in an XY plane, a quarter turn
counter-clockwise about the z axis"""
    return [ -a[1], a[0], 0, 1.0 ]

## R^4 -> R^4 functions: operate on w component
def scale4(a,c):
    """ 4 vector ``a`` times scalar ``c``"""
    return [a[0]*c,a[1]*c,a[2]*c,a[3]*c]

## Homogenize, or project back to the w=1 plane by scaling all values
## by w
def homo(a):
    """Homogenize, or project back to the w=1 plane by scaling all values by w"""
    if close(a[3],0.0):
        raise ValueError('cannot homogenize vector at infinity: {}'.format(a))
    return [ a[0]/a[3],
             a[1]/a[3],
             a[2]/a[3],
             1 ]

## R^3 -> R functions -- ignore w component
## ----------------------------------------
def dot(a,b):
    """ 3 vector ``a`` dot ``b`` """
    return a[0]*b[0]+a[1]*b[1]+a[2]*b[2]

def mag(a):
    """ compute the magnitude of 3 vector ``a``"""
    return sqrt(a[0]*a[0]+a[1]*a[1]+a[2]*a[2])

def dist(a,b):
    """ compute the euclidean distance between two 3 vector points ``a`` and ``b``"""
    return mag(sub(a,b))

def vclose(a,b):
    """ are two vectors the same, to within epsilon"""
    return close(mag(sub(a,b)),0)

## R^4 -> R functions
## ----------------------------------------
def dot4(a,b):
    """ 4 vect dot product"""
    return a[0]*b[0]+a[1]*b[1]+a[2]*b[2]+a[3]*b[3]

# pretty printing string formatter for vectors and lists of vectors.
# Falls back to str() for anything else.
def vstr(a):
    """ utility function for recursively formatting vectors
    """
    if isvect(a):
        return '[{}, {}, {}, {}]'.format(*[round(x, 4) for x in a])
    if isinstance(a,(list,tuple)) and a and all(isvect(x) for x in a):
        return '[' + ', '.join(vstr(x) for x in a) + ']'
    return str(a)

## points
## ------------------------------------

def point(x=False,y=False,z=False,w=False):
    """Point creation from point, sequence or scalars.  The result is a
new list in the w=1 hyperplane"""
    if isinstance(x,(list,tuple)):
        r = vect(x)
        if len(x) < 4:
            r[3] = 1
    else:
        r = vect(x,y,z,w)
    if r[3] <= 0:
        raise ValueError('bad w argument to point(): {}'.format(r))
    if r[3] == 1:
        return r
    return homo(r)

def ispoint(x):
    """ is ``x`` a point?"""
    return isvect(x) and x[3] > 0.0

## world axes
## ------------------------------------

def up():
    """ world up direction, +Y"""
    return direction(0,1.0,0)
